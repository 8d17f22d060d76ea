"""Pydantic schemas for validating preference writes and service inputs."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class NeglectThresholdInput(BaseModel):
    """A neglect threshold the user is allowed to store."""

    days: int = Field(ge=30, le=365)


class HeatmapRequest(BaseModel):
    """Input contract for heatmap lookups."""

    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(min_length=1)
    view: Literal["month", "quarter", "year", "season"] = "month"
    reference_date: Optional[date] = None


class SeasonalReportRequest(BaseModel):
    """Input contract for seasonal report generation."""

    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(min_length=1)
    season: Optional[Literal["spring", "summer", "fall", "winter"]] = None
    year: Optional[int] = Field(default=None, ge=1900, le=9999)


class GapAnalysisRequest(BaseModel):
    """Input contract for wardrobe gap analysis."""

    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(min_length=1)
    gender: Optional[str] = None
    force_refresh: bool = False


class TripInput(BaseModel):
    """Trip envelope supplied to the packing list builder."""

    model_config = ConfigDict(extra="ignore")

    trip_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    start_date: date
    end_date: date
    location: Optional[str] = None

    @model_validator(mode="after")
    def _validate_range(self) -> "TripInput":
        if self.end_date < self.start_date:
            raise ValueError("end_date cannot precede start_date")
        return self


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    return ValidationResult(message=message, details=exc.errors()).model_dump()


__all__ = [
    "NeglectThresholdInput",
    "HeatmapRequest",
    "SeasonalReportRequest",
    "GapAnalysisRequest",
    "TripInput",
    "ValidationResult",
    "validation_failure",
]
