"""Pydantic models describing leaderboard documents as stored in Firestore.

Field names follow the web application's camelCase documents. The same models
validate documents fetched over the Firestore REST API and JSON exports of the
collections.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _text_or_none(value: object) -> object:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, str):
        return value
    return None


def _text_or_blank(value: object) -> object:
    text = _text_or_none(value)
    return "" if text is None else text


class DocumentBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CategoryDocument(DocumentBaseModel):
    id: str
    name: str = ""
    leaderboard_type: str | None = Field(default=None, alias="leaderboardType")

    _normalize_id = field_validator("id", "name", mode="before")(_text_or_blank)
    _normalize_type = field_validator("leaderboard_type", mode="before")(_text_or_none)


class PlatformDocument(DocumentBaseModel):
    id: str
    name: str = ""

    _normalize_text = field_validator("id", "name", mode="before")(_text_or_blank)


class LevelDocument(DocumentBaseModel):
    id: str
    name: str = ""

    _normalize_text = field_validator("id", "name", mode="before")(_text_or_blank)


class RunDocument(DocumentBaseModel):
    id: str = ""
    leaderboard_type: str | None = Field(default=None, alias="leaderboardType")
    category: str | None = None
    platform: str | None = None
    level: str | None = None
    src_category_name: str | None = Field(default=None, alias="srcCategoryName")
    src_platform_name: str | None = Field(default=None, alias="srcPlatformName")
    src_level_name: str | None = Field(default=None, alias="srcLevelName")
    player_name: str | None = Field(default=None, alias="playerName")
    verified: bool = False
    verified_by: str | None = Field(default=None, alias="verifiedBy")

    _normalize_id = field_validator("id", mode="before")(_text_or_blank)
    _normalize_text = field_validator(
        "leaderboard_type",
        "category",
        "platform",
        "level",
        "src_category_name",
        "src_platform_name",
        "src_level_name",
        "player_name",
        "verified_by",
        mode="before",
    )(_text_or_none)

    @field_validator("verified", mode="before")
    @classmethod
    def _coerce_verified(cls, value: object) -> bool:
        return value is True or (isinstance(value, str) and value.strip().lower() == "true")


class ExportBundle(DocumentBaseModel):
    """JSON export of the leaderboard collections, keyed by collection name."""

    leaderboard_entries: list[RunDocument] = Field(
        default_factory=list[RunDocument],
        alias="leaderboardEntries",
    )
    categories: list[CategoryDocument] = Field(default_factory=list[CategoryDocument])
    platforms: list[PlatformDocument] = Field(default_factory=list[PlatformDocument])
    levels: list[LevelDocument] = Field(default_factory=list[LevelDocument])
