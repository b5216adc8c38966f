"""Translate leaderboard documents into domain entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from runboard.domain.model import Category, Level, Platform, RunRecord
from runboard.domain.normalization import normalize_leaderboard_type

from .schema import CategoryDocument, ExportBundle, LevelDocument, PlatformDocument, RunDocument

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path


def run_from_document(document: RunDocument) -> RunRecord:
    return RunRecord(
        id=document.id,
        leaderboard_type=document.leaderboard_type,
        category=document.category or "",
        platform=document.platform or "",
        level=document.level or "",
        src_category_name=document.src_category_name,
        src_platform_name=document.src_platform_name,
        src_level_name=document.src_level_name,
        player_name=document.player_name,
        verified=document.verified,
        verified_by=document.verified_by,
    )


def category_from_document(document: CategoryDocument) -> Category:
    return Category(
        id=document.id,
        name=document.name,
        leaderboard_type=normalize_leaderboard_type(document.leaderboard_type),
    )


def platform_from_document(document: PlatformDocument) -> Platform:
    return Platform(id=document.id, name=document.name)


def level_from_document(document: LevelDocument) -> Level:
    return Level(id=document.id, name=document.name)


def parse_run(payload: Mapping[str, object], *, document_id: str | None = None) -> RunRecord:
    """Validate a raw run document; ``document_id`` wins over an embedded ``id``."""

    document = RunDocument.model_validate(payload)
    if document_id:
        document = document.model_copy(update={"id": document_id})
    return run_from_document(document)


def parse_category(payload: Mapping[str, object], *, document_id: str | None = None) -> Category:
    data = {**payload, "id": document_id} if document_id else payload
    return category_from_document(CategoryDocument.model_validate(data))


def parse_platform(payload: Mapping[str, object], *, document_id: str | None = None) -> Platform:
    data = {**payload, "id": document_id} if document_id else payload
    return platform_from_document(PlatformDocument.model_validate(data))


def parse_level(payload: Mapping[str, object], *, document_id: str | None = None) -> Level:
    data = {**payload, "id": document_id} if document_id else payload
    return level_from_document(LevelDocument.model_validate(data))


def load_export_bundle(path: Path) -> ExportBundle:
    """Read and validate a JSON export of the leaderboard collections."""

    return ExportBundle.model_validate_json(path.read_bytes())
