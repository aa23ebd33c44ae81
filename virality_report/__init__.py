from __future__ import annotations

from .config import config_sha256, load_config, resolve_runtime_secrets
from .config_schema import AppConfig
from .errors import ConfigError, ReportInputError, ScrapeError, StorageError
from .metrics import aggregate
from .normalize import extract_fields
from .quality import profile_quality_score
from .ranking import top_posts
from .report import ViralityReport, generate_report
from .shapes import normalize_posts

__all__ = [
    "AppConfig",
    "ConfigError",
    "ReportInputError",
    "ScrapeError",
    "StorageError",
    "ViralityReport",
    "aggregate",
    "config_sha256",
    "extract_fields",
    "generate_report",
    "load_config",
    "normalize_posts",
    "profile_quality_score",
    "resolve_runtime_secrets",
    "top_posts",
]
