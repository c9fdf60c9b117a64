"""Hash sets of records keyed by name, addressed through FNV-1a member hashes."""

from __future__ import annotations

from typing import Any, Iterable, Optional

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


class SetNotExistError(KeyError):
    """Raised when no set is stored at the given key."""

    def __init__(self, message: str = "set not exist"):
        super().__init__(message)


class SetMemberNotExistError(KeyError):
    """Raised when a member is not part of a set."""

    def __init__(self, message: str = "set member not exist"):
        super().__init__(message)


class MemberEmptyError(ValueError):
    """Raised when no member was given."""

    def __init__(self, message: str = "item empty"):
        super().__init__(message)


def fnv32(value: Optional[bytes]) -> int:
    """Return the 32-bit FNV-1a hash of ``value``."""
    result = _FNV32_OFFSET
    for byte in value or b"":
        result ^= byte
        result = (result * _FNV32_PRIME) & 0xFFFFFFFF
    return result


class SetStore:
    """Named sets whose members are records indexed by the hash of their value."""

    def __init__(self):
        self.m: dict[str, dict[int, Any]] = {}

    def _get(self, key: str) -> dict[int, Any]:
        try:
            return self.m[key]
        except KeyError:
            raise SetNotExistError() from None

    def sadd(self, key: str, values: Iterable[bytes], records: Iterable[Any]) -> None:
        """Add each value, with the record at the same position, to the set at ``key``."""
        members = self.m.setdefault(key, {})
        for value, record in zip(values, records, strict=True):
            members[fnv32(value)] = record

    def srem(self, key: str, *args: bytes) -> None:
        """Remove the given values from the set at ``key``."""
        members = self._get(key)
        if not args or args[0] is None:
            raise MemberEmptyError()
        for value in args:
            members.pop(fnv32(value), None)

    def shas_key(self, key: str) -> bool:
        return key in self.m

    def spop(self, key: str) -> Optional[Any]:
        """Remove and return an arbitrary member record, or None if there is none."""
        members = self.m.get(key)
        if not members:
            return None
        _, record = members.popitem()
        return record

    def scard(self, key: str) -> int:
        """Return the number of members of the set at ``key``, 0 if it does not exist."""
        return len(self.m.get(key, ()))

    def _pair(self, key1: str, key2: str) -> tuple[dict[int, Any], dict[int, Any]]:
        if key1 not in self.m or key2 not in self.m:
            raise SetNotExistError()
        return self.m[key1], self.m[key2]

    def sdiff(self, key1: str, key2: str) -> list[Any]:
        """Return the records of ``key1`` whose values are not in ``key2``."""
        first, second = self._pair(key1, key2)
        return [record for h, record in first.items() if h not in second]

    def sinter(self, key1: str, key2: str) -> list[Any]:
        """Return the records of ``key1`` whose values are also in ``key2``."""
        first, second = self._pair(key1, key2)
        return [record for h, record in first.items() if h in second]

    def sis_member(self, key: str, value: bytes) -> bool:
        return fnv32(value) in self._get(key)

    def sare_members(self, key: str, *args: bytes) -> bool:
        """Return True only if every given value is a member of the set at ``key``."""
        members = self._get(key)
        return all(fnv32(value) in members for value in args)

    def smembers(self, key: str) -> list[Any]:
        return list(self._get(key).values())

    def smove(self, key1: str, key2: str, value: bytes) -> bool:
        """Move ``value`` from the set at ``key1`` to the set at ``key2``."""
        source, destination = self._pair(key1, key2)
        hash_ = fnv32(value)
        if hash_ not in source:
            raise SetMemberNotExistError()
        destination.setdefault(hash_, source[hash_])
        self.srem(key1, value)
        return True

    def sunion(self, key1: str, key2: str) -> list[Any]:
        """Return the records of both sets, each member once."""
        first, second = self._pair(key1, key2)
        records = list(first.values())
        records.extend(record for h, record in second.items() if h not in first)
        return records