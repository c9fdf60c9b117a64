"""Packing a file or directory tree into a (gzipped) tar stream and unpacking it."""

from __future__ import annotations

import gzip
import os
import posixpath
import shutil
import tarfile
from typing import BinaryIO, Iterator


def tar_gz_compress(dst: BinaryIO, src: str) -> None:
    """Write ``src`` as a gzip-compressed tar archive to ``dst``."""
    with gzip.GzipFile(fileobj=dst, mode="wb") as gz:
        tar_compress(gz, src)


def _walk(path: str) -> Iterator[str]:
    yield path
    if os.path.isdir(path) and not os.path.islink(path):
        for name in sorted(os.listdir(path)):
            yield from _walk(os.path.join(path, name))


def tar_compress(dst: BinaryIO, src: str) -> None:
    """Write ``src`` as a tar archive to ``dst``.

    A directory is stored under its own base name. A missing ``src``
    yields an empty archive rather than an error.
    """
    with tarfile.open(fileobj=dst, mode="w|") as tarball:
        try:
            is_dir = os.path.isdir(src) and os.stat(src) is not None
        except OSError:
            return
        if not os.path.exists(src):
            return
        base_dir = os.path.basename(os.path.normpath(src)) if is_dir else ""

        for path in _walk(src):
            if base_dir:
                rel = os.path.relpath(path, src)
                name = base_dir if rel == os.curdir else posixpath.join(base_dir, *rel.split(os.sep))
            else:
                name = os.path.basename(path)
            info = tarball.gettarinfo(name=path, arcname=name)
            if info.isreg():
                with open(os.path.normpath(path), "rb") as file:
                    tarball.addfile(info, file)
            else:
                tarball.addfile(info)


def tar_decompress(dst: str, src: BinaryIO) -> None:
    """Unpack the tar archive read from ``src`` into directory ``dst``."""
    flags = os.O_CREAT | os.O_TRUNC | os.O_WRONLY | getattr(os, "O_BINARY", 0)
    with tarfile.open(fileobj=src, mode="r|") as tar:
        for member in tar:
            path = os.path.join(dst, member.name)
            mode = member.mode & 0o7777
            if member.isdir():
                os.makedirs(path, mode=mode, exist_ok=True)
                continue
            content = tar.extractfile(member)
            raw = os.open(os.path.normpath(path), flags, mode)
            with os.fdopen(raw, "wb") as out:
                if content is not None:
                    shutil.copyfileobj(content, out)