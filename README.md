# burrowdb

Building blocks for an embedded key/value store, in pure Python with no
third-party dependencies.

## What is inside

- `burrowdb.fd_manager`: `FdManager`, an LRU cache of open file handles.
  `get_fd(path)` opens (and creates) a file or reuses the cached handle,
  counting its users; `reduce_using(path)` gives a handle back;
  `clean_useless_fd()` closes idle handles, least recently used first, up to
  the clean threshold; `close_by_path(path)` and `close()` close handles.
  It is also a context manager that closes everything on exit.
- `burrowdb.rwmanager`: `FileIORWManager` and `MMapRWManager`, positional
  `write_at` / `read_at` access to a data file grown to a fixed capacity,
  through plain file I/O or a memory map (`RWMode.FILE_IO` / `RWMode.MMAP`).
  Both are created with `open(fdm, path, capacity)`. The mmap manager raises
  `IndexOutOfBoundError` for offsets outside the mapping and
  `UnmappedMemoryError` after `release()`.
- `burrowdb.throttle`: `Throttle(max_workers)`, which caps the number of
  concurrent workers (`do()` / `done(err)`) and makes `finish()` wait for all
  of them and raise the first error any of them reported.
- `burrowdb.options`: the `Options` dataclass (its field defaults are the
  defaults), `default_options()`, and `with_*` builders such as `with_dir`,
  `with_segment_size`, `with_rw_mode` and `with_node_num`, applied to a copy
  through `apply_options(base, *options)`.
- `burrowdb.tar`: `tar_compress`, `tar_gz_compress` and `tar_decompress`
  for packing a file or directory into a (gzipped) tar stream and unpacking
  it into a directory. A missing source gives an empty archive.
- `burrowdb.ttl_manager`: `TTLManager`, per-bucket, per-key expiry timers.
  `add(bucket, key, seconds, callback)` schedules a callback (replacing any
  earlier timer for the key); `run()` fires due callbacks and blocks until
  `close()`, so run it on its own thread.
- `burrowdb.index`: `BucketIndex(factory)`, a map from bucket name to a
  structure created on first use by `get_with_default`.
- `burrowdb.set`: `SetStore`, named sets of records addressed by the FNV-1a
  hash (`fnv32`) of their values: `sadd`, `srem`, `spop`, `scard`, `sdiff`,
  `sinter`, `sunion`, `smove`, `sis_member`, `sare_members`, `smembers`.
- `burrowdb.skiplist`: `SkipList`, ordered by score and then by member value,
  with score-range queries (`ScoreRangeOptions` for limits and open ends)
  and 1-based rank queries.
- `burrowdb.sorted_set`: `SortedSet`, named skip lists with `zadd`,
  `zrange_by_score`, `zrange_by_rank`, `zrank`, `zrev_rank`, `zscore`,
  `zpop_min`, `zpop_max` and friends.

Missing sets and sorted sets raise `SetNotExistError` /
`SortedSetNotFoundError`; missing members raise `SetMemberNotExistError` /
`SortedSetMemberNotExistError`.

## Example

```python
from burrowdb.options import apply_options, default_options, with_dir, with_segment_size
from burrowdb.set import SetStore
from burrowdb.sorted_set import SortedSet

opts = apply_options(default_options(), with_dir("/tmp/burrow"), with_segment_size(1024))
assert opts.segment_size == 1024

sets = SetStore()
sets.sadd("fruits", [b"apple", b"pear"], ["rec-apple", "rec-pear"])
assert sets.sis_member("fruits", b"apple")
assert sets.scard("fruits") == 2

# Records here are the member values themselves.
board = SortedSet(value_of=lambda record: record)
board.zadd("scores", 3.0, b"carol", b"carol")
board.zadd("scores", 1.0, b"alice", b"alice")
records, scores = board.zrange_by_rank("scores", 1, -1)
assert records == [b"alice", b"carol"] and scores == [1.0, 3.0]
assert board.zrank("scores", b"carol") == 2
```

## What it does not do

These are parts, not a database. There are no transactions, no on-disk
entry format, no recovery of data files on start-up, no merging of data
files, no list structure and no B-tree key index; `Options` only records
settings that such a database would read. There is no command-line tool or
server.

## Running the tests

```
pip install -e .[test]
pytest
```