"""Skip list ordered by score, then by member value, with rank spans."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from burrowdb.set import fnv32

SKIP_LIST_MAX_LEVEL = 32
SKIP_LIST_P = 0.25
_DEFAULT_LIMIT = (1 << 31) - 1


@dataclass
class ScoreRangeOptions:
    """Options of a score range query.

    ``limit`` caps the number of nodes returned when positive; the exclude
    flags make the corresponding end of the interval open.
    """

    limit: int = 0
    exclude_start: bool = False
    exclude_end: bool = False


@dataclass(eq=False)
class SkipListLevel:
    forward: Optional["SkipListNode"] = None
    span: int = 0


@dataclass(eq=False)
class SkipListNode:
    """A member of the skip list: its hash, record, score and links."""

    hash: int
    record: Any
    score: float
    level: list[SkipListLevel] = field(default_factory=list, repr=False)
    backward: Optional["SkipListNode"] = field(default=None, repr=False)

    @classmethod
    def create(cls, level: int, score: float, hash_: int, record: Any) -> "SkipListNode":
        return cls(hash_, record, score, [SkipListLevel() for _ in range(level)])


def random_level() -> int:
    """Return a level in [1, SKIP_LIST_MAX_LEVEL]; higher levels are rarer."""
    level = 1
    while (random.getrandbits(31) & 0xFFFF) < SKIP_LIST_P * 0xFFFF:
        level += 1
    return min(level, SKIP_LIST_MAX_LEVEL)


def _compare(a: bytes, b: bytes) -> int:
    return (a > b) - (a < b)


class SkipList:
    """Sorted collection of members; ``value_of`` maps a record to its member value."""

    def __init__(self, value_of: Callable[[Any], bytes]):
        self._value_of = value_of
        self.header = SkipListNode.create(SKIP_LIST_MAX_LEVEL, 0, fnv32(b""), None)
        self.tail: Optional[SkipListNode] = None
        self.length = 0
        self.level = 1
        self.nodes: dict[int, SkipListNode] = {}

    def _cmp(self, r1: Any, r2: Any) -> int:
        return _compare(bytes(self._value_of(r1)), bytes(self._value_of(r2)))

    def _insert_node(self, score: float, hash_: int, record: Any) -> SkipListNode:
        update: list[Optional[SkipListNode]] = [None] * SKIP_LIST_MAX_LEVEL
        rank = [0] * SKIP_LIST_MAX_LEVEL

        x = self.header
        for i in range(self.level - 1, -1, -1):
            rank[i] = 0 if i == self.level - 1 else rank[i + 1]
            while True:
                fwd = x.level[i].forward
                if fwd is None:
                    break
                if fwd.score < score or (fwd.score == score and self._cmp(fwd.record, record) < 0):
                    rank[i] += x.level[i].span
                    x = fwd
                else:
                    break
            update[i] = x

        level = random_level()
        if level > self.level:
            for i in range(self.level, level):
                rank[i] = 0
                update[i] = self.header
                self.header.level[i].span = self.length
            self.level = level

        x = SkipListNode.create(level, score, hash_, record)
        for i in range(level):
            prev = update[i]
            x.level[i].forward = prev.level[i].forward
            prev.level[i].forward = x
            x.level[i].span = prev.level[i].span - (rank[0] - rank[i])
            prev.level[i].span = (rank[0] - rank[i]) + 1

        for i in range(level, self.level):
            update[i].level[i].span += 1

        x.backward = None if update[0] is self.header else update[0]
        if x.level[0].forward is not None:
            x.level[0].forward.backward = x
        else:
            self.tail = x

        self.length += 1
        return x

    def _delete_node(self, x: SkipListNode, update: list[Optional[SkipListNode]]) -> None:
        for i in range(self.level):
            prev = update[i]
            if prev.level[i].forward is x:
                prev.level[i].span += x.level[i].span - 1
                prev.level[i].forward = x.level[i].forward
            else:
                prev.level[i].span -= 1
        if x.level[0].forward is not None:
            x.level[0].forward.backward = x.backward
        else:
            self.tail = x.backward
        while self.level > 1 and self.header.level[self.level - 1].forward is None:
            self.level -= 1
        self.length -= 1
        self.nodes.pop(x.hash, None)

    def _delete(self, score: float, hash_: int) -> bool:
        update: list[Optional[SkipListNode]] = [None] * SKIP_LIST_MAX_LEVEL
        target = self.nodes[hash_]

        x = self.header
        for i in range(self.level - 1, -1, -1):
            while True:
                fwd = x.level[i].forward
                if fwd is None:
                    break
                if fwd.score < score or (fwd.score == score and self._cmp(fwd.record, target.record) < 0):
                    x = fwd
                else:
                    break
            update[i] = x

        x = x.level[0].forward
        if x is not None and x.score == score and self._cmp(x.record, target.record) == 0:
            self._delete_node(x, update)
            return True
        return False

    def __len__(self) -> int:
        return self.length

    def peek_min(self) -> Optional[SkipListNode]:
        """Return the node with the lowest score, or None if empty."""
        return self.header.level[0].forward

    def pop_min(self) -> Optional[SkipListNode]:
        node = self.header.level[0].forward
        if node is not None:
            self.remove(node.hash)
        return node

    def peek_max(self) -> Optional[SkipListNode]:
        """Return the node with the highest score, or None if empty."""
        return self.tail

    def pop_max(self) -> Optional[SkipListNode]:
        node = self.tail
        if node is not None:
            self.remove(node.hash)
        return node

    def put(self, score: float, value: bytes, record: Any) -> None:
        """Insert a member, or move an existing member whose score changed."""
        hash_ = fnv32(value)
        existing = self.nodes.get(hash_)
        new_node = None
        if existing is not None:
            if existing.score != score:
                self._delete(existing.score, existing.hash)
                new_node = self._insert_node(score, hash_, record)
        else:
            new_node = self._insert_node(score, hash_, record)
        if new_node is not None:
            self.nodes[hash_] = new_node

    def remove(self, hash_: int) -> Optional[SkipListNode]:
        """Remove and return the member with the given hash, or None."""
        found = self.nodes.get(hash_)
        if found is not None:
            self._delete(found.score, hash_)
        return found

    def get_by_score_range(
        self, start: float, end: float, options: Optional[ScoreRangeOptions] = None
    ) -> list[SkipListNode]:
        """Return nodes with scores in [start, end]; descending when start > end."""
        limit = _DEFAULT_LIMIT
        if options is not None and options.limit > 0:
            limit = options.limit
        exclude_start = options is not None and options.exclude_start
        exclude_end = options is not None and options.exclude_end
        reverse = start > end
        if reverse:
            start, end = end, start
            exclude_start, exclude_end = exclude_end, exclude_start

        if self.length == 0:
            return []
        if reverse:
            return self._search_reverse(exclude_start, exclude_end, start, end, limit)
        return self._search_forward(exclude_start, exclude_end, start, end, limit)

    def _search_forward(self, exclude_start, exclude_end, start, end, limit) -> list[SkipListNode]:
        x = self.header
        for i in range(self.level - 1, -1, -1):
            while True:
                fwd = x.level[i].forward
                if fwd is None:
                    break
                if fwd.score < start or (exclude_start and fwd.score == start):
                    x = fwd
                else:
                    break

        nodes = []
        x = x.level[0].forward
        while x is not None and limit > 0:
            if x.score > end or (exclude_end and x.score == end):
                break
            nodes.append(x)
            limit -= 1
            x = x.level[0].forward
        return nodes

    def _search_reverse(self, exclude_start, exclude_end, start, end, limit) -> list[SkipListNode]:
        x = self.header
        for i in range(self.level - 1, -1, -1):
            while True:
                fwd = x.level[i].forward
                if fwd is None:
                    break
                if fwd.score < end or (not exclude_end and fwd.score == end):
                    x = fwd
                else:
                    break

        nodes = []
        current: Optional[SkipListNode] = None if x is self.header else x
        while current is not None and limit > 0:
            if current.score < start or (exclude_start and current.score == start):
                break
            nodes.append(current)
            limit -= 1
            current = current.backward
        return nodes

    def _sanitize_indexes(self, start: int, end: int) -> tuple[int, int]:
        if start < 0:
            start = self.length + start + 1
        if end < 0:
            end = self.length + end + 1
        return max(start, 1), max(end, 1)

    def get_by_rank_range(self, start: int, end: int, remove: bool = False) -> list[SkipListNode]:
        """Return nodes with 1-based ranks in [start, end], removing them if asked.

        Negative ranks count from the end; start > end yields descending order.
        """
        update: list[Optional[SkipListNode]] = [None] * SKIP_LIST_MAX_LEVEL
        start, end = self._sanitize_indexes(start, end)
        reverse = start > end
        if reverse:
            start, end = end, start

        traversed = 0
        x = self.header
        for i in range(self.level - 1, -1, -1):
            while x.level[i].forward is not None and traversed + x.level[i].span < start:
                traversed += x.level[i].span
                x = x.level[i].forward
            if remove:
                update[i] = x
            elif traversed + 1 == start:
                break

        nodes = []
        traversed += 1
        current = x.level[0].forward
        while current is not None and traversed <= end:
            following = current.level[0].forward
            nodes.append(current)
            if remove:
                self._delete_node(current, update)
            traversed += 1
            current = following

        if reverse:
            nodes.reverse()
        return nodes

    def get_by_rank(self, rank: int, remove: bool = False) -> Optional[SkipListNode]:
        """Return the node at a 1-based rank, or None."""
        nodes = self.get_by_rank_range(rank, rank, remove)
        return nodes[0] if len(nodes) == 1 else None

    def get_by_value(self, value: bytes) -> Optional[SkipListNode]:
        return self.nodes.get(fnv32(value))

    def find_rank(self, hash_: int) -> int:
        """Return the 1-based ascending rank of a member, or 0 if absent."""
        target = self.nodes.get(hash_)
        if target is None:
            return 0
        rank = 0
        x = self.header
        for i in range(self.level - 1, -1, -1):
            while True:
                fwd = x.level[i].forward
                if fwd is None:
                    break
                if fwd.score < target.score or (
                    fwd.score == target.score and self._cmp(fwd.record, target.record) <= 0
                ):
                    rank += x.level[i].span
                    x = fwd
                else:
                    break
            if x is target:
                return rank
        return 0

    def find_rev_rank(self, hash_: int) -> int:
        """Return the 1-based descending rank of a member, or 0 if absent."""
        if self.length == 0 or hash_ not in self.nodes:
            return 0
        return self.length - self.find_rank(hash_) + 1