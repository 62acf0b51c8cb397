"""Pydantic schemas for scan reports and generated scenarios."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ScanStatus(str, Enum):
    """Outcome of ingesting a sensor export."""

    processed = "processed"
    partial = "partial"
    failed = "failed"


class RowError(BaseModel):
    """Details about a row that failed validation or parsing."""

    row_number: int = Field(..., ge=1)
    reason: str


class ReadingResult(BaseModel):
    """Alerts raised for one valid row of a sensor export."""

    row_number: int = Field(..., ge=1)
    timestamp: Optional[datetime] = None
    alerts: List[str] = Field(default_factory=list)


class AlertCounts(BaseModel):
    reading_count: int = Field(..., ge=0)
    alerting_readings: int = Field(..., ge=0)
    alert_count: int = Field(..., ge=0)
    per_parameter_count: Dict[str, int] = Field(default_factory=dict)


class ScanReport(BaseModel):
    """Full record describing one scanned sensor export."""

    source: str
    species: str
    status: ScanStatus
    results: List[ReadingResult] = Field(default_factory=list)
    errors: List[RowError] = Field(default_factory=list)
    summary: Optional[AlertCounts] = None


class ScenarioReading(BaseModel):
    """Raw reading row as exported by the scenario generator."""

    timestamp: str
    temperature: float
    ph: float
    dissolved_oxygen: float


class Scenario(BaseModel):
    """Named batch of generated readings with evaluator-derived expectations."""

    name: str
    description: str
    species: Optional[str] = None
    readings: List[ScenarioReading] = Field(default_factory=list)
    expected_alerts: Optional[int] = Field(
        default=None, description="Total alerts the readings raise for the scenario species."
    )
    alerting_readings: Optional[int] = Field(
        default=None, description="Number of readings raising at least one alert."
    )
    species_expectations: Dict[str, List[int]] = Field(
        default_factory=dict, description="Per-species alert counts, one entry per reading."
    )
