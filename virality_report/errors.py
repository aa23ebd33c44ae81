from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


class ReportInputError(ValueError):
    """Raised when a submitted profile URL cannot be analyzed."""


class ScrapeError(RuntimeError):
    """Raised when a scraping provider call or dataset read fails."""


class StorageError(RuntimeError):
    """Raised when reading or writing creator records in SQLite fails."""
