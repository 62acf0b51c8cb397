from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from settings import get_settings


@dataclass(frozen=True)
class CLIConfig:
    species: str
    output_dir: Path
    seed: Optional[int] = None


def load_config(
    species: Optional[str] = None,
    output_dir: Optional[Path] = None,
    seed: Optional[int] = None,
) -> CLIConfig:
    """Resolve CLI options, falling back to environment-backed settings."""
    settings = get_settings()
    chosen_species = (species or "").strip().lower() or settings.default_species
    return CLIConfig(
        species=chosen_species,
        output_dir=output_dir if output_dir is not None else Path(settings.export_dir),
        seed=seed if seed is not None else settings.generator_seed,
    )
