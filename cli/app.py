from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.config import CLIConfig, load_config
from cli.render import echo_heading, render_alerts, render_profile, render_report, render_written
from logging_config import configure_logging
from models.records import InvalidReadingError, SensorReading
from services.evaluator import WaterQualityChecker
from services.generator import SensorDataGenerator
from services.processor import ReadingProcessor
from services.thresholds import SpeciesProfile, UnknownSpeciesError, available_species, get_profile
from settings import is_log_level
from storage.exporter import ScenarioExporter


@dataclass
class CLIState:
    config: CLIConfig


app = typer.Typer(
    help="Check aquaculture water-quality readings against species safe ranges.",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def _resolve_profile(state: CLIState, species: Optional[str]) -> SpeciesProfile:
    name = species or state.config.species
    try:
        return get_profile(name)
    except UnknownSpeciesError as exc:
        raise typer.BadParameter(str(exc), param_hint="--species") from exc


@app.callback()
def main(
    ctx: typer.Context,
    species: Optional[str] = typer.Option(
        None,
        "--species",
        "-s",
        help="Species profile to check against (defaults to AQUACULTURE_SPECIES env or salmon).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    if log_level is not None and not is_log_level(log_level):
        raise typer.BadParameter(
            f"Unknown log level {log_level!r}; use DEBUG, INFO, WARNING, ERROR or CRITICAL.",
            param_hint="--log-level",
        )
    configure_logging(log_level)
    ctx.obj = CLIState(config=load_config(species=species))


@app.command("species")
def species_command() -> None:
    """List the registered species profiles and their safe ranges."""
    for name in available_species():
        render_profile(get_profile(name))
        typer.echo()


@app.command("check")
def check_command(
    ctx: typer.Context,
    temperature: float = typer.Option(..., "--temperature", "-t", help="Water temperature in °C."),
    ph: float = typer.Option(..., "--ph", "-p", help="pH (0-14)."),
    dissolved_oxygen: float = typer.Option(
        ..., "--dissolved-oxygen", "-o", help="Dissolved oxygen in mg/L."
    ),
    species: Optional[str] = typer.Option(None, "--species", "-s", help="Override the species profile."),
    fail_on_alert: bool = typer.Option(
        False,
        "--fail-on-alert/--no-fail-on-alert",
        help="Exit with status 1 when any alert is raised.",
    ),
) -> None:
    """Evaluate a single reading."""
    state = _get_state(ctx)
    profile = _resolve_profile(state, species)

    try:
        reading = SensorReading(temperature=temperature, ph=ph, dissolved_oxygen=dissolved_oxygen)
    except InvalidReadingError as exc:
        typer.secho(f"Invalid reading: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc

    alerts = WaterQualityChecker(profile).check(reading)
    echo_heading(f"{profile.display_name} check")
    render_alerts(alerts)
    if alerts and fail_on_alert:
        raise typer.Exit(code=1)


@app.command("scan")
def scan_command(
    ctx: typer.Context,
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="CSV or JSON sensor export."
    ),
    species: Optional[str] = typer.Option(None, "--species", "-s", help="Override the species profile."),
    fail_on_alert: bool = typer.Option(
        False,
        "--fail-on-alert/--no-fail-on-alert",
        help="Exit with status 1 when any reading raises an alert.",
    ),
) -> None:
    """Evaluate every reading in a sensor export."""
    state = _get_state(ctx)
    profile = _resolve_profile(state, species)
    processor = ReadingProcessor(checker=WaterQualityChecker(profile))

    try:
        report = processor.process_file(file)
    except ValueError as exc:
        typer.secho(f"Could not scan {file}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    render_report(report)
    if fail_on_alert and report.summary is not None and report.summary.alert_count:
        raise typer.Exit(code=1)


@app.command("generate")
def generate_command(
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-d",
        file_okay=False,
        help="Directory for exported files (defaults to AQUACULTURE_EXPORT_DIR env or ./sensor_data).",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducible data."),
    include_csv: bool = typer.Option(
        True, "--csv/--no-csv", help="Also write one CSV file per scenario."
    ),
) -> None:
    """Generate test scenarios and export them as JSON and CSV."""
    config = load_config(output_dir=output_dir, seed=seed)
    scenarios = SensorDataGenerator(seed=config.seed).generate_all_scenarios()
    paths = ScenarioExporter(config.output_dir).export_all(scenarios, include_csv=include_csv)

    echo_heading(f"Generated {len(scenarios)} test scenarios")
    for scenario in scenarios.values():
        typer.echo(f"  - {scenario.name}")
        typer.echo(f"    {scenario.description}")
    typer.echo()
    render_written(paths)
