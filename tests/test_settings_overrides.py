from __future__ import annotations

import logging
from pathlib import Path

import pytest

from cli.config import load_config
from logging_config import ContextualFormatter
from settings import get_settings, is_log_level


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_apply_without_environment(monkeypatch) -> None:
    for name in ("AQUACULTURE_SPECIES", "AQUACULTURE_EXPORT_DIR", "AQUACULTURE_GENERATOR_SEED", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.default_species == "salmon"
    assert settings.export_dir == "./sensor_data"
    assert settings.generator_seed is None
    assert settings.log_level == "INFO"


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("AQUACULTURE_SPECIES", "Tilapia")
    monkeypatch.setenv("AQUACULTURE_EXPORT_DIR", str(tmp_path))
    monkeypatch.setenv("AQUACULTURE_GENERATOR_SEED", "17")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.default_species == "tilapia"
    assert settings.export_dir == str(tmp_path)
    assert settings.generator_seed == 17
    assert settings.log_level == "DEBUG"


def test_blank_or_invalid_values_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("AQUACULTURE_SPECIES", "   ")
    monkeypatch.setenv("AQUACULTURE_GENERATOR_SEED", "abc")

    settings = get_settings()

    assert settings.default_species == "salmon"
    assert settings.generator_seed is None


def test_cli_options_override_settings(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("AQUACULTURE_SPECIES", "tilapia")
    monkeypatch.setenv("AQUACULTURE_GENERATOR_SEED", "3")

    from_env = load_config()
    overridden = load_config(species="SALMON", output_dir=tmp_path, seed=9)

    assert from_env.species == "tilapia"
    assert from_env.seed == 3
    assert overridden.species == "salmon"
    assert overridden.output_dir == tmp_path
    assert overridden.seed == 9
    assert isinstance(from_env.output_dir, Path)


def test_contextual_formatter_appends_known_extras() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", context_keys=["species", "row_number"])
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "Checked", None, None)
    record.species = "salmon"
    record.row_number = 4
    record.unrelated = "ignored"

    assert formatter.format(record) == "Checked | species=salmon row_number=4"


def test_contextual_formatter_leaves_plain_messages_untouched() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "Plain", None, None)

    assert formatter.format(record) == "Plain"


def test_unknown_log_level_falls_back(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "bogus")

    assert get_settings().log_level == "INFO"


def test_log_level_names_are_validated() -> None:
    assert is_log_level("warning")
    assert is_log_level(" DEBUG ")
    assert not is_log_level("bogus")
    assert not is_log_level("")
