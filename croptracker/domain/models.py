"""
Domain models for Crop Tracker.

Defines the persisted planting record, the input shapes accepted at the
store's write boundary, and the value types produced by the aggregate
engine and the query pipeline. Persisted JSON uses camelCase keys
(``datePlanted``, ``createdAt``...) while Python code uses snake_case.
"""
from __future__ import annotations

import math
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class StatusFilter(str, Enum):
    """Confirmation-status filter understood by the query pipeline."""

    ALL = "all"
    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"


class CropRecord(BaseModel):
    """
    A single crop-planting entry as persisted in the record slot.
    """

    id: str = Field(..., description="Opaque unique identifier assigned by the store.")
    name: str = Field(..., description="Crop name.")
    date_planted: date = Field(..., description="Calendar date the crop was planted.")
    acreage: float = Field(..., description="Land area in acres.")
    expenses: float = Field(..., description="Monetary amount spent.")
    notes: str = Field("", description="Free-text notes.")
    confirmed: bool = Field(False, description="Whether planting is confirmed.")
    created_at: datetime = Field(..., description="Creation timestamp (UTC).")
    updated_at: datetime = Field(..., description="Last mutation timestamp (UTC).")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # Timestamps without an offset are taken as UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class CropFields(BaseModel):
    """
    Record fields supplied by a caller when adding a crop.

    Enforces the write-boundary invariants: non-empty name, positive
    acreage, non-negative expenses.
    """

    name: str = Field(..., min_length=1)
    date_planted: date
    acreage: float = Field(..., gt=0, allow_inf_nan=False)
    expenses: float = Field(..., ge=0, allow_inf_nan=False)
    notes: str = ""
    confirmed: bool = False

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
        str_strip_whitespace=True,
    )


class CropUpdate(BaseModel):
    """
    Partial update for an existing record. Only explicitly supplied fields
    are applied; identity and timestamp keys are ignored.
    """

    name: Optional[str] = None
    date_planted: Optional[date] = None
    acreage: Optional[float] = None
    expenses: Optional[float] = None
    notes: Optional[str] = None
    confirmed: Optional[bool] = None

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class StoreStats(BaseModel):
    """Aggregate totals over a record collection."""

    total_count: int = 0
    total_acreage: float = 0.0
    total_expenses: float = 0.0
    confirmed_count: int = 0

    model_config = ConfigDict(frozen=True)


class CropQuery(BaseModel):
    """Combined search / status / date-range / pagination request."""

    search_term: str = ""
    status_filter: StatusFilter = StatusFilter.ALL
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1)

    model_config = ConfigDict(frozen=True)

    @field_validator("search_term", mode="before")
    @classmethod
    def _none_means_empty(cls, value: Optional[str]) -> str:
        return value or ""


class QueryPage(BaseModel):
    """One page of the filtered record view."""

    items: List[CropRecord] = Field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 20

    model_config = ConfigDict(frozen=True)

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_count / self.page_size))

    @property
    def first_index(self) -> int:
        """1-based position of the first item on this page, 0 when empty."""
        return (self.page - 1) * self.page_size + 1 if self.items else 0

    @property
    def last_index(self) -> int:
        """1-based position of the last item on this page, 0 when empty."""
        return self.first_index + len(self.items) - 1 if self.items else 0


__all__ = [
    "StatusFilter",
    "CropRecord",
    "CropFields",
    "CropUpdate",
    "StoreStats",
    "CropQuery",
    "QueryPage",
]
