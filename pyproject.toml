[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "miniredis"
version = "2.0.0"
description = "In-memory Redis state for tests: numbered databases, pub/sub subscribers, transaction context, glob key matching and tools to compare against a real redis-server."
requires-python = ">=3.10"
dependencies = []
keywords = ["redis", "testing", "fake", "pubsub", "glob", "in-memory"]
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
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["miniredis"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
