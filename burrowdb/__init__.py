"""Storage building blocks for an embedded key/value database: file handle cache, read/write managers, options, tar archiving, expiry timers, bucket index, sets and sorted sets."""

__version__ = "0.1.0"