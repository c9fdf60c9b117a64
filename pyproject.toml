[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "burrowdb"
version = "0.1.0"
description = "Storage building blocks for an embedded key/value database: file handle cache, read/write managers, options, archiving, expiry timers, sets and sorted sets"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "key-value", "embedded", "skiplist", "sorted-set", "storage", "mmap"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["burrowdb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
