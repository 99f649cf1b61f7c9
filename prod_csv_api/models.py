from __future__ import annotations

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class DatasetKind(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


class UpsertOutcome(str, Enum):
    INSERTED = "inserted"
    SKIPPED_DUPLICATE = "skipped_duplicate"


class FileReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: DatasetKind
    year: str
    month: str
    day: Optional[str] = None
    filename: str
    path: str


class ProductionRecord(BaseModel):
    """Latest row of a Trd (daily production) file."""

    model_config = ConfigDict(frozen=True)

    file_used: str = Field(examples=["Trd20260113.csv"])
    partnumber: str = Field(examples=["PN-100"])
    shot_current_part: int
    shot_ok: int
    shot_ng: int
    shot_total: int
    ct: float = Field(description="Cycle time")
    timestamp: str = Field(examples=["2026-01-13T10:00:00Z"])


class StatusRecord(BaseModel):
    """Latest row of a Sts (monthly machine status) file."""

    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(examples=["2026-01-13T10:00:00Z"])
    status: int
    partnumber: str = Field(examples=["PN-100"])
    file_used: str = Field(examples=["Sts202601.csv"])


class NotFoundResponse(BaseModel):
    error: str = "File not found"
    expected_file: str
    path: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    ok: bool = True
