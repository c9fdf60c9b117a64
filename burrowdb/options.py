"""Database options and helpers that build modified copies of them."""

from __future__ import annotations

import dataclasses
import enum
from datetime import timedelta
from typing import Callable, Optional

from burrowdb.rwmanager import RWMode

B = 1
KB = 1024 * B
MB = 1024 * KB
GB = 1024 * MB

DEFAULT_SEGMENT_SIZE = 256 * MB

ErrorHandler = Callable[[BaseException], None]
LessFunc = Callable[[str, str], bool]
Option = Callable[["Options"], None]


class EntryIdxMode(enum.IntEnum):
    """Which parts of an entry are kept in the in-memory index."""

    HINT_KEY_VAL_AND_RAM_IDX_MODE = 0
    HINT_KEY_AND_RAM_IDX_MODE = 1


class ExpiredDeleteType(enum.IntEnum):
    """Structure used to schedule deletion of expired keys."""

    TIME_WHEEL = 0
    TIME_HEAP = 1


@dataclasses.dataclass
class Options:
    """Parameters for opening a database; the field defaults are the default options."""

    dir: str = ""
    entry_idx_mode: EntryIdxMode = EntryIdxMode.HINT_KEY_VAL_AND_RAM_IDX_MODE
    rw_mode: RWMode = RWMode.FILE_IO
    segment_size: int = DEFAULT_SEGMENT_SIZE
    # Node number used for transaction ids, in the range [1, 1023].
    node_num: int = 1
    sync_enable: bool = True
    max_fd_nums_in_cache: int = 0
    # Fraction of the fd cache recycled at once; only values in (0, 1) are used.
    clean_fds_cache_threshold: float = 0.0
    buffer_size_of_recovery: int = 0
    gc_when_close: bool = False
    commit_buffer_size: int = 4 * MB
    error_handler: Optional[ErrorHandler] = None
    less_func: Optional[LessFunc] = None
    # A zero interval disables automatic merging.
    merge_interval: timedelta = timedelta(hours=2)
    max_batch_count: int = (15 * DEFAULT_SEGMENT_SIZE // 4) // 100 // 100
    max_batch_size: int = (15 * DEFAULT_SEGMENT_SIZE // 4) // 100
    expired_delete_type: ExpiredDeleteType = ExpiredDeleteType.TIME_WHEEL
    max_write_record_count: int = 0


def default_options() -> Options:
    """Return a fresh set of default options."""
    return Options()


def apply_options(base: Options, *args: Option) -> Options:
    """Return a copy of ``base`` with every option in ``args`` applied in order."""
    result = dataclasses.replace(base)
    for option in args:
        option(result)
    return result


def _setter(name: str, value) -> Option:
    def apply(opt: Options) -> None:
        setattr(opt, name, value)

    return apply


def with_dir(directory: str) -> Option:
    return _setter("dir", directory)


def with_entry_idx_mode(mode: EntryIdxMode) -> Option:
    return _setter("entry_idx_mode", mode)


def with_rw_mode(mode: RWMode) -> Option:
    return _setter("rw_mode", mode)


def with_segment_size(size: int) -> Option:
    return _setter("segment_size", size)


def with_max_batch_count(count: int) -> Option:
    return _setter("max_batch_count", count)


def with_max_batch_size(size: int) -> Option:
    return _setter("max_batch_size", size)


def with_node_num(num: int) -> Option:
    return _setter("node_num", num)


def with_sync_enable(enable: bool) -> Option:
    return _setter("sync_enable", enable)


def with_max_fd_nums_in_cache(num: int) -> Option:
    return _setter("max_fd_nums_in_cache", num)


def with_clean_fds_cache_threshold(threshold: float) -> Option:
    return _setter("clean_fds_cache_threshold", threshold)


def with_buffer_size_of_recovery(size: int) -> Option:
    return _setter("buffer_size_of_recovery", size)


def with_gc_when_close(enable: bool) -> Option:
    return _setter("gc_when_close", enable)


def with_error_handler(handler: ErrorHandler) -> Option:
    return _setter("error_handler", handler)


def with_commit_buffer_size(size: int) -> Option:
    return _setter("commit_buffer_size", size)


def with_less_func(func: LessFunc) -> Option:
    return _setter("less_func", func)


def with_max_write_record_count(count: int) -> Option:
    return _setter("max_write_record_count", count)