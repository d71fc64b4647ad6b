"""SQLite link storage and request handling for a small self-hosted URL shortener."""

__version__ = "6.1.0"
__all__ = ["database", "links"]