"""Leaderboard document schemas shared by the storage adapters."""

from __future__ import annotations

from .schema import (
    CategoryDocument,
    ExportBundle,
    LevelDocument,
    PlatformDocument,
    RunDocument,
)
from .translator import (
    category_from_document,
    level_from_document,
    load_export_bundle,
    parse_category,
    parse_level,
    parse_platform,
    parse_run,
    platform_from_document,
    run_from_document,
)

__all__ = [
    "CategoryDocument",
    "ExportBundle",
    "LevelDocument",
    "PlatformDocument",
    "RunDocument",
    "category_from_document",
    "level_from_document",
    "load_export_bundle",
    "parse_category",
    "parse_level",
    "parse_platform",
    "parse_run",
    "platform_from_document",
    "run_from_document",
]
