"""Named sorted sets of records, each backed by a skip list."""

from __future__ import annotations

from typing import Any, Callable, Optional

from burrowdb.set import fnv32
from burrowdb.skiplist import ScoreRangeOptions, SkipList, SkipListNode


class SortedSetNotFoundError(KeyError):
    """Raised when no sorted set is stored at the given key."""

    def __init__(self, message: str = "the sortedSet does not exist"):
        super().__init__(message)


class SortedSetMemberNotExistError(KeyError):
    """Raised when a member is not part of a sorted set."""

    def __init__(self, message: str = "the member of sortedSet does not exist"):
        super().__init__(message)


class SortedSetIsEmptyError(LookupError):
    """Raised when a peek or pop finds the sorted set empty."""

    def __init__(self, message: str = "the sortedSet is empty"):
        super().__init__(message)


def _unpack(nodes: list[SkipListNode]) -> tuple[list[Any], list[float]]:
    return [node.record for node in nodes], [float(node.score) for node in nodes]


class SortedSet:
    """Sorted sets keyed by name; ``value_of`` maps a record to its member value."""

    def __init__(self, value_of: Callable[[Any], bytes]):
        self._value_of = value_of
        self.m: dict[str, SkipList] = {}

    def _get(self, key: str) -> SkipList:
        try:
            return self.m[key]
        except KeyError:
            raise SortedSetNotFoundError() from None

    def zadd(self, key: str, score: float, value: bytes, record: Any) -> None:
        """Add ``value`` with ``score`` to the set at ``key``, creating the set if absent."""
        skip_list = self.m.get(key)
        if skip_list is None:
            skip_list = self.m[key] = SkipList(self._value_of)
        skip_list.put(score, value, record)

    def zmembers(self, key: str) -> list[tuple[Any, float]]:
        """Return every member of the set as ``(record, score)`` pairs."""
        return [(node.record, node.score) for node in self._get(key).nodes.values()]

    def zcard(self, key: str) -> int:
        return len(self._get(key))

    def zcount(
        self, key: str, start: float, end: float, opts: Optional[ScoreRangeOptions] = None
    ) -> int:
        """Return how many members have scores within the given range."""
        return len(self._get(key).get_by_score_range(start, end, opts))

    @staticmethod
    def _node_or_empty(node: Optional[SkipListNode]) -> tuple[Any, float]:
        if node is None:
            raise SortedSetIsEmptyError()
        return node.record, node.score

    def zpeek_max(self, key: str) -> tuple[Any, float]:
        """Return ``(record, score)`` of the highest-scored member."""
        return self._node_or_empty(self._get(key).peek_max())

    def zpop_max(self, key: str) -> tuple[Any, float]:
        """Remove and return ``(record, score)`` of the highest-scored member."""
        return self._node_or_empty(self._get(key).pop_max())

    def zpeek_min(self, key: str) -> tuple[Any, float]:
        """Return ``(record, score)`` of the lowest-scored member."""
        return self._node_or_empty(self._get(key).peek_min())

    def zpop_min(self, key: str) -> tuple[Any, float]:
        """Remove and return ``(record, score)`` of the lowest-scored member."""
        return self._node_or_empty(self._get(key).pop_min())

    def zrange_by_score(
        self, key: str, start: float, end: float, opts: Optional[ScoreRangeOptions] = None
    ) -> tuple[list[Any], list[float]]:
        """Return the records and scores of members within a score range."""
        return _unpack(self._get(key).get_by_score_range(start, end, opts))

    def zrange_by_rank(self, key: str, start: int, end: int) -> tuple[list[Any], list[float]]:
        """Return the records and scores of members within a 1-based rank range."""
        return _unpack(self._get(key).get_by_rank_range(start, end, False))

    def zrem(self, key: str, value: bytes) -> Any:
        """Remove ``value`` from the set and return its record."""
        node = self._get(key).remove(fnv32(value))
        if node is None:
            raise SortedSetMemberNotExistError()
        return node.record

    def zrem_range_by_rank(self, key: str, start: int, end: int) -> None:
        """Remove the members within a 1-based rank range."""
        self._get(key).get_by_rank_range(start, end, True)

    def _rank_range_nodes(self, key: str, start: int, end: int) -> list[SkipListNode]:
        skip_list = self.m.get(key)
        if skip_list is None:
            return []
        return skip_list.get_by_rank_range(start, end, False)

    def zrank(self, key: str, value: bytes) -> int:
        """Return the 1-based ascending rank of ``value``."""
        rank = self._get(key).find_rank(fnv32(value))
        if rank == 0:
            raise SortedSetMemberNotExistError()
        return rank

    def zrev_rank(self, key: str, value: bytes) -> int:
        """Return the 1-based descending rank of ``value``."""
        rank = self._get(key).find_rev_rank(fnv32(value))
        if rank == 0:
            raise SortedSetMemberNotExistError()
        return rank

    def zscore(self, key: str, value: bytes) -> float:
        node = self._get(key).get_by_value(value)
        if node is None:
            raise SortedSetMemberNotExistError()
        return float(node.score)

    def zexist(self, key: str, value: bytes) -> bool:
        return fnv32(value) in self._get(key).nodes