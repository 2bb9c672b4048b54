[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "distpatterns"
version = "0.1.0"
description = "Small, working building blocks for concurrent and distributed system patterns."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "distributed-systems",
    "concurrency",
    "logical-clocks",
    "vector-clock",
    "saga",
    "two-phase-commit",
    "write-ahead-log",
    "paxos",
    "raft",
    "event-sourcing",
    "transactional-outbox",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
distpatterns-api-composition = "distpatterns.api_composition:main"

[tool.hatch.build.targets.wheel]
packages = ["distpatterns"]

[tool.hatch.build.targets.sdist]
include = ["distpatterns", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
