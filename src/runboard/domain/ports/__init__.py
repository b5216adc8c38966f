"""Domain port definitions for adapters."""

from __future__ import annotations

from .reference_data import ReferenceDataSource
from .runs import RunRepository

__all__ = [
    "ReferenceDataSource",
    "RunRepository",
]
