"""Pydantic models describing the Firestore REST payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .codec import decode_fields, document_id_from_name


class FirestoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class FirestoreDocument(FirestoreBaseModel):
    name: str
    fields: dict[str, dict[str, Any]] = Field(default_factory=dict[str, dict[str, Any]])
    create_time: str | None = Field(default=None, alias="createTime")
    update_time: str | None = Field(default=None, alias="updateTime")

    @property
    def document_id(self) -> str:
        return document_id_from_name(self.name)

    def to_data(self) -> dict[str, object]:
        return decode_fields(self.fields)


class ListDocumentsResponse(FirestoreBaseModel):
    documents: list[FirestoreDocument] = Field(default_factory=list[FirestoreDocument])
    next_page_token: str | None = Field(default=None, alias="nextPageToken")


class RunQueryItem(FirestoreBaseModel):
    """One element of the ``:runQuery`` response stream.

    Items without ``document`` only report progress (``readTime``, ``skippedResults``).
    """

    document: FirestoreDocument | None = None
    read_time: str | None = Field(default=None, alias="readTime")


class ErrorDetail(FirestoreBaseModel):
    code: int = 0
    message: str = ""
    status: str | None = None


class ErrorResponse(FirestoreBaseModel):
    error: ErrorDetail
