"""Least-recently-used cache of open data-file handles."""

from __future__ import annotations

import contextlib
import errno
import math
import os
import threading
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, Optional

DEFAULT_MAX_FILE_NUMS = 256


@dataclass(eq=False)
class FdInfo:
    """A cached file handle with its usage count and list links."""

    fd: Optional[BinaryIO] = None
    path: str = ""
    using: int = 0
    next: Optional["FdInfo"] = field(default=None, repr=False)
    prev: Optional["FdInfo"] = field(default=None, repr=False)


class DoubleLinkedList:
    """Doubly linked list of FdInfo nodes between two sentinel nodes."""

    def __init__(self):
        self.head = FdInfo()
        self.tail = FdInfo()
        self.clear()

    def clear(self) -> None:
        self.head.next = self.tail
        self.tail.prev = self.head
        self._size = 0

    def add_node(self, node: FdInfo) -> None:
        """Insert ``node`` right after the head sentinel."""
        first = self.head.next
        first.prev = node
        node.next = first
        self.head.next = node
        node.prev = self.head
        self._size += 1

    def remove_node(self, node: FdInfo) -> None:
        """Unlink ``node`` from the list."""
        node.prev.next = node.next
        node.next.prev = node.prev
        node.prev = None
        node.next = None
        self._size -= 1

    def move_node_to_front(self, node: FdInfo) -> None:
        self.remove_node(node)
        self.add_node(node)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[FdInfo]:
        node = self.head.next
        while node is not self.tail:
            yield node
            node = node.next

    def __reversed__(self) -> Iterator[FdInfo]:
        node = self.tail.prev
        while node is not self.head:
            yield node
            node = node.prev


def _open_file(path: str) -> BinaryIO:
    flags = os.O_CREAT | os.O_RDWR | getattr(os, "O_BINARY", 0)
    raw = os.open(path, flags, 0o644)
    try:
        return os.fdopen(raw, "r+b", buffering=0)
    except BaseException:
        os.close(raw)
        raise


class FdManager:
    """Keeps open file handles in an LRU cache so data files are reused."""

    def __init__(self, max_fd_nums: int, clean_threshold: float):
        self._lock = threading.RLock()
        self.cache: dict[str, FdInfo] = {}
        self.fd_list = DoubleLinkedList()
        self.size = 0
        self.max_fd_nums = DEFAULT_MAX_FILE_NUMS
        self.clean_threshold_nums = math.floor(0.5 * self.max_fd_nums)
        if max_fd_nums > 0:
            self.max_fd_nums = max_fd_nums
        if 0.0 < clean_threshold < 1.0:
            self.clean_threshold_nums = math.floor(clean_threshold * self.max_fd_nums)

    def get_fd(self, path: str) -> BinaryIO:
        """Return an open handle for ``path``, creating the file if needed."""
        clean_path = os.path.normpath(path)
        with self._lock:
            info = self.cache.get(clean_path)
            if info is not None:
                info.using += 1
                self.fd_list.move_node_to_front(info)
                return info.fd

            try:
                fd = _open_file(clean_path)
            except OSError as exc:
                if exc.errno != errno.EMFILE:
                    raise
                try:
                    self.clean_useless_fd()
                except OSError:
                    raise exc from None
                fd = _open_file(clean_path)
                self._add_to_cache(fd, clean_path)
                return fd

            if self.size >= self.clean_threshold_nums:
                with contextlib.suppress(OSError):
                    self.clean_useless_fd()
            if self.size >= self.max_fd_nums:
                return fd
            self._add_to_cache(fd, clean_path)
            return fd

    def _add_to_cache(self, fd: BinaryIO, clean_path: str) -> None:
        info = FdInfo(fd=fd, path=clean_path, using=1)
        self.fd_list.add_node(info)
        self.size += 1
        self.cache[clean_path] = info

    def reduce_using(self, path: str) -> None:
        """Record that one user of ``path`` gave its handle back."""
        clean_path = os.path.normpath(path)
        with self._lock:
            try:
                node = self.cache[clean_path]
            except KeyError:
                raise KeyError(f"{clean_path!r} is not in the fd cache") from None
            node.using -= 1

    def close(self) -> None:
        """Close every cached handle and empty the cache."""
        with self._lock:
            for node in list(reversed(self.fd_list)):
                node.fd.close()
                self.cache.pop(node.path, None)
                self.size -= 1
            self.fd_list.clear()

    def close_by_path(self, path: str) -> None:
        """Close and forget the cached handle of ``path``, if any."""
        clean_path = os.path.normpath(path)
        with self._lock:
            info = self.cache.pop(clean_path, None)
            if info is None:
                return
            self.fd_list.remove_node(info)
            self.size -= 1
            info.fd.close()

    def clean_useless_fd(self) -> None:
        """Close up to the threshold number of least recently used idle handles."""
        with self._lock:
            remaining = self.clean_threshold_nums
            for node in list(reversed(self.fd_list)):
                if remaining <= 0:
                    break
                if node.using != 0:
                    continue
                self.fd_list.remove_node(node)
                node.fd.close()
                self.size -= 1
                self.cache.pop(node.path, None)
                remaining -= 1

    def __enter__(self) -> "FdManager":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()