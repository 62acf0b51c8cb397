"""Species profiles and their safe-range threshold tables."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Protocol

from models.records import Parameter


@dataclass(frozen=True)
class ParameterThreshold:
    """Inclusive bound pair for a single parameter."""

    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def __post_init__(self) -> None:
        if self.minimum is None and self.maximum is None:
            raise ValueError("A threshold needs at least one of minimum or maximum.")


ThresholdTable = Mapping[Parameter, ParameterThreshold]


class ThresholdProvider(Protocol):
    def thresholds(self) -> ThresholdTable:
        ...


class UnknownSpeciesError(LookupError):
    """Raised when thresholds are requested for an unregistered species."""


@dataclass(frozen=True)
class SpeciesProfile:
    """Fixed threshold table for one farmed species."""

    name: str
    display_name: str
    table: ThresholdTable

    def thresholds(self) -> ThresholdTable:
        return self.table


def _freeze(table: Dict[Parameter, ParameterThreshold]) -> ThresholdTable:
    return MappingProxyType(dict(table))


# Salmon are cold-water fish.
SALMON = SpeciesProfile(
    name="salmon",
    display_name="Salmon",
    table=_freeze(
        {
            Parameter.temperature: ParameterThreshold(minimum=12.0, maximum=18.0),
            Parameter.ph: ParameterThreshold(minimum=6.5, maximum=8.5),
            Parameter.dissolved_oxygen: ParameterThreshold(minimum=7.0),
        }
    ),
)

TILAPIA = SpeciesProfile(
    name="tilapia",
    display_name="Tilapia",
    table=_freeze(
        {
            Parameter.temperature: ParameterThreshold(minimum=25.0, maximum=30.0),
            Parameter.ph: ParameterThreshold(minimum=6.5, maximum=9.0),
            Parameter.dissolved_oxygen: ParameterThreshold(minimum=5.0),
        }
    ),
)

_PROFILES: Mapping[str, SpeciesProfile] = MappingProxyType(
    {profile.name: profile for profile in (SALMON, TILAPIA)}
)


def available_species() -> list[str]:
    return sorted(_PROFILES)


def get_profile(name: str) -> SpeciesProfile:
    """Look up a registered species profile by name (case-insensitive)."""
    key = name.strip().lower()
    profile = _PROFILES.get(key)
    if profile is None:
        raise UnknownSpeciesError(
            f"Unknown species {name!r}. Known species: {', '.join(available_species())}."
        )
    return profile
