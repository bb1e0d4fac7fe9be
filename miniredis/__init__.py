"""In-memory Redis state, glob patterns and comparison tooling for tests."""

__version__ = "2.0.0"