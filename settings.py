from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_SPECIES_ENV = "AQUACULTURE_SPECIES"
_EXPORT_DIR_ENV = "AQUACULTURE_EXPORT_DIR"
_SEED_ENV = "AQUACULTURE_GENERATOR_SEED"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    default_species: str
    export_dir: str
    generator_seed: Optional[int]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_seed(default: Optional[int]) -> Optional[int]:
    value = os.getenv(_SEED_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        return int(candidate)
    except ValueError:
        return default


def is_log_level(name: str) -> bool:
    return isinstance(logging.getLevelName(name.strip().upper()), int)


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    if not is_log_level(candidate):
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        default_species=_read_str_env(_SPECIES_ENV, "salmon").lower(),
        export_dir=_read_str_env(_EXPORT_DIR_ENV, "./sensor_data"),
        generator_seed=_read_seed(None),
        log_level=_read_log_level("INFO"),
    )
