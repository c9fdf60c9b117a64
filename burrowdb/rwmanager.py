"""Positional read/write access to data files through plain I/O or mmap."""

from __future__ import annotations

import abc
import enum
import mmap
import os
from typing import BinaryIO, Optional

from burrowdb.fd_manager import FdManager


class RWMode(enum.IntEnum):
    """How data files are read and written."""

    FILE_IO = 0
    MMAP = 1


class UnmappedMemoryError(RuntimeError):
    """Raised when the mapped region has already been released."""

    def __init__(self, message: str = "unmapped memory"):
        super().__init__(message)


class IndexOutOfBoundError(IndexError):
    """Raised when an offset lies outside the mapped region."""

    def __init__(self, message: str = "offset out of mapped region"):
        super().__init__(message)


def _ensure_capacity(fd: BinaryIO, capacity: int) -> None:
    if capacity <= 0:
        raise ValueError("capacity must be positive")
    if os.fstat(fd.fileno()).st_size < capacity:
        os.ftruncate(fd.fileno(), capacity)


class RWManager(abc.ABC):
    """Reads and writes a data file at given offsets."""

    def __init__(self, path: str, fdm: FdManager):
        self.path = path
        self._fdm = fdm

    @abc.abstractmethod
    def write_at(self, data: bytes, off: int) -> int:
        """Write ``data`` at offset ``off`` and return the number of bytes written."""

    @abc.abstractmethod
    def read_at(self, size: int, off: int) -> bytes:
        """Read up to ``size`` bytes starting at offset ``off``."""

    @abc.abstractmethod
    def sync(self) -> None:
        """Flush written data to stable storage."""

    def release(self) -> None:
        """Give the file handle back to the handle cache."""
        self._fdm.reduce_using(self.path)

    def close(self) -> None:
        """Close the file handle and drop it from the handle cache."""
        self._fdm.close_by_path(self.path)


class FileIORWManager(RWManager):
    """RWManager backed by ordinary positional file I/O."""

    def __init__(self, fd: BinaryIO, path: str, fdm: FdManager):
        super().__init__(path, fdm)
        self.fd = fd

    @classmethod
    def open(cls, fdm: FdManager, path: str, capacity: int) -> "FileIORWManager":
        fd = fdm.get_fd(path)
        _ensure_capacity(fd, capacity)
        return cls(fd, path, fdm)

    def write_at(self, data: bytes, off: int) -> int:
        if off < 0:
            raise ValueError("negative offset")
        view = memoryview(data)
        written = 0
        if hasattr(os, "pwrite"):
            while written < len(view):
                written += os.pwrite(self.fd.fileno(), view[written:], off + written)
        else:
            self.fd.seek(off)
            while written < len(view):
                written += self.fd.write(view[written:])
        return written

    def read_at(self, size: int, off: int) -> bytes:
        if off < 0:
            raise ValueError("negative offset")
        if hasattr(os, "pread"):
            return os.pread(self.fd.fileno(), size, off)
        self.fd.seek(off)
        return self.fd.read(size)

    def sync(self) -> None:
        os.fsync(self.fd.fileno())

    def release(self) -> None:
        """Give the file handle back to the handle cache."""
        self._fdm.reduce_using(self.path)

    def close(self) -> None:
        """Close the file handle and drop it from the handle cache."""
        self._fdm.close_by_path(self.path)


class MMapRWManager(RWManager):
    """RWManager backed by a memory mapping of the whole file."""

    def __init__(self, mapping: Optional[mmap.mmap], path: str, fdm: FdManager):
        super().__init__(path, fdm)
        self._mapping = mapping

    @classmethod
    def open(cls, fdm: FdManager, path: str, capacity: int) -> "MMapRWManager":
        fd = fdm.get_fd(path)
        _ensure_capacity(fd, capacity)
        mapping = mmap.mmap(fd.fileno(), 0, access=mmap.ACCESS_WRITE)
        return cls(mapping, path, fdm)

    def _checked(self, off: int) -> mmap.mmap:
        if self._mapping is None:
            raise UnmappedMemoryError()
        if off < 0 or off >= len(self._mapping):
            raise IndexOutOfBoundError()
        return self._mapping

    def write_at(self, data: bytes, off: int) -> int:
        mapping = self._checked(off)
        count = min(len(data), len(mapping) - off)
        mapping[off:off + count] = bytes(memoryview(data)[:count])
        return count

    def read_at(self, size: int, off: int) -> bytes:
        mapping = self._checked(off)
        return mapping[off:off + size]

    def sync(self) -> None:
        if self._mapping is None:
            raise UnmappedMemoryError()
        self._mapping.flush()

    def release(self) -> None:
        """Give the handle back and unmap the region."""
        self._fdm.reduce_using(self.path)
        if self._mapping is not None:
            self._mapping.close()
            self._mapping = None

    def close(self) -> None:
        """Close the file handle and drop it from the handle cache."""
        self._fdm.close_by_path(self.path)