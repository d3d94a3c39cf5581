[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kvdb"
version = "0.1.0"
description = "A small key/value storage abstraction with an embedded backend, batching, compression and purgeable keys"
requires-python = ">=3.10"
keywords = ["key-value", "kv", "storage", "database", "lmdb", "zstd", "blocks"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "zstandard",
    "lmdb",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kvdb"]

[tool.hatch.build.targets.sdist]
include = ["kvdb", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
