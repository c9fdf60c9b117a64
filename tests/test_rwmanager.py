import os

import pytest

from burrowdb.fd_manager import FdManager
from burrowdb.rwmanager import (
    FileIORWManager,
    IndexOutOfBoundError,
    MMapRWManager,
    UnmappedMemoryError,
)

CAPACITY = 4096


@pytest.fixture
def fdm():
    manager = FdManager(0, 0.0)
    yield manager
    manager.close()


@pytest.fixture
def data_path(tmp_path):
    return str(tmp_path / "0.dat")


def test_file_open_sets_capacity(fdm, data_path):
    FileIORWManager.open(fdm, data_path, CAPACITY)
    assert os.path.getsize(data_path) == CAPACITY


def test_file_open_rejects_bad_capacity(fdm, data_path):
    with pytest.raises(ValueError):
        FileIORWManager.open(fdm, data_path, 0)


def test_file_round_trip(fdm, data_path):
    mgr = FileIORWManager.open(fdm, data_path, CAPACITY)
    payload = b"hello burrow"
    assert mgr.write_at(payload, 100) == len(payload)
    assert mgr.read_at(len(payload), 100) == payload


def test_file_unwritten_region_is_zero(fdm, data_path):
    mgr = FileIORWManager.open(fdm, data_path, CAPACITY)
    assert mgr.read_at(16, 0) == bytes(16)


def test_file_sync_persists(fdm, data_path):
    mgr = FileIORWManager.open(fdm, data_path, CAPACITY)
    payload = b"persisted"
    mgr.write_at(payload, 10)
    mgr.sync()
    with open(data_path, "rb") as fh:
        content = fh.read()
    assert content[10:10 + len(payload)] == payload


def test_file_negative_offset(fdm, data_path):
    mgr = FileIORWManager.open(fdm, data_path, CAPACITY)
    with pytest.raises(ValueError):
        mgr.read_at(4, -1)
    with pytest.raises(ValueError):
        mgr.write_at(b"x", -1)


def test_file_release_reduces_using(fdm, data_path):
    mgr = FileIORWManager.open(fdm, data_path, CAPACITY)
    info = fdm.cache[os.path.normpath(data_path)]
    before = info.using
    mgr.release()
    assert info.using == before - 1


def test_file_close(fdm, data_path):
    mgr = FileIORWManager.open(fdm, data_path, CAPACITY)
    mgr.close()
    assert mgr.fd.closed
    assert os.path.normpath(data_path) not in fdm.cache


def test_mmap_round_trip(fdm, data_path):
    mgr = MMapRWManager.open(fdm, data_path, CAPACITY)
    try:
        payload = b"mapped bytes"
        assert mgr.write_at(payload, 7) == len(payload)
        assert mgr.read_at(len(payload), 7) == payload
    finally:
        mgr.release()


def test_mmap_sync_persists(fdm, data_path):
    mgr = MMapRWManager.open(fdm, data_path, CAPACITY)
    payload = b"flushed"
    mgr.write_at(payload, 0)
    mgr.sync()
    mgr.release()
    with open(data_path, "rb") as fh:
        assert fh.read(len(payload)) == payload


def test_mmap_write_clipped_at_end(fdm, data_path):
    mgr = MMapRWManager.open(fdm, data_path, CAPACITY)
    try:
        assert mgr.write_at(b"abcd", CAPACITY - 2) == 2
        assert mgr.read_at(10, CAPACITY - 2) == b"ab"
    finally:
        mgr.release()


@pytest.mark.parametrize("off", [-1, CAPACITY, CAPACITY + 10])
def test_mmap_offset_out_of_bounds(fdm, data_path, off):
    mgr = MMapRWManager.open(fdm, data_path, CAPACITY)
    try:
        with pytest.raises(IndexOutOfBoundError):
            mgr.write_at(b"x", off)
        with pytest.raises(IndexOutOfBoundError):
            mgr.read_at(1, off)
    finally:
        mgr.release()


def test_mmap_release_unmaps(fdm, data_path):
    mgr = MMapRWManager.open(fdm, data_path, CAPACITY)
    info = fdm.cache[os.path.normpath(data_path)]
    before = info.using
    mgr.release()
    assert info.using == before - 1
    with pytest.raises(UnmappedMemoryError):
        mgr.write_at(b"x", 0)
    with pytest.raises(UnmappedMemoryError):
        mgr.read_at(1, 0)
    with pytest.raises(UnmappedMemoryError):
        mgr.sync()


def test_mmap_sees_file_io_writes(fdm, data_path):
    file_mgr = FileIORWManager.open(fdm, data_path, CAPACITY)
    payload = b"shared handle"
    file_mgr.write_at(payload, 32)
    map_mgr = MMapRWManager.open(fdm, data_path, CAPACITY)
    try:
        assert map_mgr.read_at(len(payload), 32) == payload
    finally:
        map_mgr.release()
        file_mgr.release()


def test_mmap_close_drops_cache(fdm, data_path):
    mgr = MMapRWManager.open(fdm, data_path, CAPACITY)
    mgr.release()
    mgr.close()
    assert os.path.normpath(data_path) not in fdm.cache