"""Domain models shared across services."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


TEMPERATURE_MIN = -50.0
TEMPERATURE_MAX = 60.0
PH_MIN = 0.0
PH_MAX = 14.0
DISSOLVED_OXYGEN_MIN = 0.0


class Parameter(str, Enum):
    """Measured water-quality parameters, in evaluation order."""

    temperature = "temperature"
    ph = "ph"
    dissolved_oxygen = "dissolved_oxygen"


class Direction(str, Enum):
    too_low = "too_low"
    too_high = "too_high"


class InvalidReadingError(ValueError):
    """Raised when a sensor reading cannot be constructed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


@dataclass(frozen=True, slots=True)
class SensorReading:
    """A single validated snapshot of tank water quality."""

    temperature: float
    ph: float
    dissolved_oxygen: float
    timestamp: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not (_is_number(self.temperature) and TEMPERATURE_MIN <= self.temperature <= TEMPERATURE_MAX):
            raise InvalidReadingError(
                "temperature",
                f"Temperature must be between {TEMPERATURE_MIN} and {TEMPERATURE_MAX}, "
                f"got {self.temperature!r}",
            )
        if not (_is_number(self.ph) and PH_MIN <= self.ph <= PH_MAX):
            raise InvalidReadingError(
                "ph",
                f"pH must be between {PH_MIN} and {PH_MAX}, got {self.ph!r}",
            )
        if not (_is_number(self.dissolved_oxygen) and self.dissolved_oxygen >= DISSOLVED_OXYGEN_MIN):
            raise InvalidReadingError(
                "dissolved_oxygen",
                f"Dissolved oxygen must be >= {DISSOLVED_OXYGEN_MIN}, "
                f"got {self.dissolved_oxygen!r}",
            )

    def value_of(self, parameter: Parameter) -> float:
        return getattr(self, parameter.value)


@dataclass(frozen=True, slots=True)
class Alert:
    """One violated bound, kept structured until it is rendered."""

    parameter: Parameter
    direction: Direction
    value: float
    bound: float
