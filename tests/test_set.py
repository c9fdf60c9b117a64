from collections import Counter
from dataclasses import dataclass

import pytest

from burrowdb.set import (
    MemberEmptyError,
    SetMemberNotExistError,
    SetNotExistError,
    SetStore,
    fnv32,
)


@dataclass(frozen=True)
class _Record:
    name: str
    value: bytes


def make_records(count):
    return [_Record(f"r{i}", f"value-{i:04d}-payload".encode()) for i in range(count)]


def values_of(records):
    return [r.value for r in records]


def same_elements(got, want):
    return Counter(got) == Counter(want)


def _names(records):
    return sorted(r.name for r in records)


@pytest.fixture
def four_sets():
    store = SetStore()
    records = make_records(10)
    values = values_of(records)
    store.sadd("set1", values[:5], records[:5])
    store.sadd("set2", values[2:6], records[2:6])
    store.sadd("set3", values[2:7], records[2:7])
    store.sadd("set4", values[7:], records[7:])
    return store, records


def test_fnv32_known_values():
    assert fnv32(b"") == 0x811C9DC5
    assert fnv32(b"a") == 0xE40C292C
    assert fnv32(None) == fnv32(b"")


def test_sadd():
    store = SetStore()
    records = make_records(3)
    store.sadd("key", values_of(records), records)
    assert store.sare_members("key", *values_of(records)) is True


def test_sadd_length_mismatch():
    store = SetStore()
    with pytest.raises(ValueError):
        store.sadd("key", [b"a", b"b"], [object()])


def test_srem():
    store = SetStore()
    records = make_records(4)
    values = values_of(records)
    store.sadd("key", values, records)

    store.srem("key", values[0])
    store.srem("key", *values[1:])
    assert store.scard("key") == 0

    store.sadd("key", values, records)
    store.srem("key", *values)
    assert store.smembers("key") == []

    with pytest.raises(SetNotExistError):
        store.srem("fake key", *values)
    with pytest.raises(MemberEmptyError):
        store.srem("key", None)
    with pytest.raises(MemberEmptyError):
        store.srem("key")


@pytest.mark.parametrize(
    "key1, key2, want",
    [
        ("set1", "set2", ["r0", "r1"]),
        ("set1", "set4", ["r0", "r1", "r2", "r3", "r4"]),
        ("set3", "set2", ["r6"]),
    ],
)
def test_sdiff(four_sets, key1, key2, want):
    store, _ = four_sets
    got = store.sdiff(key1, key2)
    assert len(got) == len(want)
    assert sorted(r.name for r in got) == want


@pytest.mark.parametrize(
    "key1, key2",
    [("fake_key1", "set2"), ("set1", "fake_key2"), ("fake_key1", "fake_key2")],
)
def test_set_operations_on_missing_sets(four_sets, key1, key2):
    store, _ = four_sets
    for operation in (store.sdiff, store.sinter, store.sunion):
        with pytest.raises(SetNotExistError):
            operation(key1, key2)


@pytest.mark.parametrize(
    "key, want",
    [("set1", 5), ("set2", 4), ("set3", 5), ("key_fake", 0)],
)
def test_scard(four_sets, key, want):
    store, _ = four_sets
    assert store.scard(key) == want


@pytest.mark.parametrize(
    "key1, key2, want",
    [
        ("set1", "set2", ["r2", "r3", "r4"]),
        ("set2", "set3", ["r2", "r3", "r4", "r5"]),
        ("set1", "set4", []),
    ],
)
def test_sinter(four_sets, key1, key2, want):
    store, _ = four_sets
    got = store.sinter(key1, key2)
    assert len(got) == len(want)
    assert sorted(r.name for r in got) == want


def test_smembers():
    store = SetStore()
    records = make_records(3)
    store.sadd("set", values_of(records), records)
    members = store.smembers("set")
    assert set(records[0:1]) <= set(members)
    assert set(records[1:]) <= set(members)
    assert same_elements(members, records)
    with pytest.raises(SetNotExistError):
        store.smembers("fake_key")


def test_smove():
    store = SetStore()
    records = make_records(3)
    values = values_of(records)
    store.sadd("set1", values[:2], records[:2])
    store.sadd("set2", values[2:], records[2:])

    assert store.smove("set1", "set2", values[1]) is True
    assert same_elements(store.smembers("set1"), records[0:1])
    assert same_elements(store.smembers("set2"), records[1:])

    with pytest.raises(SetMemberNotExistError):
        store.smove("set1", "set2", values[2])
    with pytest.raises(SetNotExistError):
        store.smove("fake key", "set2", values[2])
    with pytest.raises(SetNotExistError):
        store.smove("set1", "fake key", values[2])


def test_spop():
    store = SetStore()
    records = make_records(2)
    store.sadd("set", values_of(records), records)
    popped = [store.spop("set"), store.spop("set")]
    assert set(popped) == set(records)
    assert store.spop("set") is None
    assert store.spop("missing") is None


def test_sis_member():
    store = SetStore()
    records = make_records(1)
    store.sadd("key", values_of(records), records)
    assert store.sis_member("key", records[0].value) is True
    assert store.sis_member("key", b"some-other-random-member") is False
    with pytest.raises(SetNotExistError):
        store.sis_member("fake key", b"anything")


def test_sare_members():
    store = SetStore()
    records = make_records(4)
    values = values_of(records)
    store.sadd("set", values, records)
    assert store.sare_members("set", *values[0:2]) is True
    assert store.sare_members("set", *values[2:]) is True
    assert store.sare_members("set", *values) is True
    assert store.sare_members("set", b"not-a-member-of-this-set") is False
    with pytest.raises(SetNotExistError):
        store.sare_members("fake key", *values)


def test_sunion():
    store = SetStore()
    records = make_records(10)
    values = values_of(records)
    store.sadd("set1", values[:5], records[:5])
    store.sadd("set2", values[2:6], records[2:6])
    store.sadd("set3", values[2:7], records[2:7])
    store.sadd("set4", values[7:], records[7:])

    union1 = store.sunion("set1", "set4")
    assert len(union1) == 8
    assert sorted(r.name for r in union1) == ["r0", "r1", "r2", "r3", "r4", "r7", "r8", "r9"]
    union2 = store.sunion("set2", "set3")
    assert len(union2) == 5
    assert sorted(r.name for r in union2) == ["r2", "r3", "r4", "r5", "r6"]


def test_shas_key():
    store = SetStore()
    store.sadd("present", [], [])
    assert store.shas_key("present") is True
    assert store.shas_key("absent") is False