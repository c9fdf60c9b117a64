"""Per-bucket registry of index structures."""

from __future__ import annotations

from typing import Callable, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


class BucketIndex(Generic[T]):
    """Maps bucket names to index structures created on first use by ``factory``."""

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._idx: dict[str, T] = {}

    def get_with_default(self, bucket: str) -> T:
        """Return the structure of ``bucket``, creating it if absent."""
        try:
            return self._idx[bucket]
        except KeyError:
            created = self._factory()
            self._idx[bucket] = created
            return created

    def get(self, bucket: str) -> Optional[T]:
        """Return the structure of ``bucket``, or None if it has none."""
        return self._idx.get(bucket)

    def delete(self, bucket: str) -> None:
        self._idx.pop(bucket, None)

    def __contains__(self, bucket: object) -> bool:
        return bucket in self._idx

    def __len__(self) -> int:
        return len(self._idx)

    def __iter__(self) -> Iterator[str]:
        """Iterate over bucket names; buckets may be deleted while iterating."""
        return iter(list(self._idx))

    def values(self) -> list[T]:
        return list(self._idx.values())