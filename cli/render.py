from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Sequence

import typer

from models.schemas import ScanReport, ScanStatus
from services.formatter import display_name, unit_for
from services.thresholds import SpeciesProfile

_STATUS_COLORS = {
    ScanStatus.processed: typer.colors.GREEN,
    ScanStatus.partial: typer.colors.YELLOW,
    ScanStatus.failed: typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_alerts(alerts: Sequence[str]) -> None:
    if not alerts:
        typer.secho("All parameters within safe range.", fg=typer.colors.GREEN)
        return
    for alert in alerts:
        typer.secho(f"  ! {alert}", fg=typer.colors.RED)


def render_profile(profile: SpeciesProfile) -> None:
    echo_heading(f"{profile.display_name} ({profile.name})")
    for parameter, limits in profile.thresholds().items():
        unit = unit_for(parameter)
        low = f"{limits.minimum}{unit}" if limits.minimum is not None else "-"
        high = f"{limits.maximum}{unit}" if limits.maximum is not None else "-"
        typer.echo(f"  {display_name(parameter)}: min {low}, max {high}")


def render_report(report: ScanReport) -> None:
    echo_heading("Scan Result")
    echo_key_values([("source", report.source), ("species", report.species)])
    typer.secho(f"status: {report.status.value}", fg=_STATUS_COLORS[report.status])

    typer.echo()
    echo_heading("Summary")
    if report.summary is not None:
        echo_key_values(
            [
                ("reading_count", report.summary.reading_count),
                ("alerting_readings", report.summary.alerting_readings),
                ("alert_count", report.summary.alert_count),
            ]
        )
        if report.summary.per_parameter_count:
            typer.echo("per_parameter_count:")
            for parameter, count in report.summary.per_parameter_count.items():
                typer.echo(f"  - {parameter}: {count}")
    else:
        typer.echo("No valid readings.")

    typer.echo()
    echo_heading("Alerts")
    alerting = [result for result in report.results if result.alerts]
    if alerting:
        for result in alerting:
            stamp = result.timestamp.isoformat() if result.timestamp else "no timestamp"
            typer.echo(f"  row {result.row_number} ({stamp}):")
            for alert in result.alerts:
                typer.secho(f"    ! {alert}", fg=typer.colors.RED)
    else:
        typer.echo("No alerts raised.")

    typer.echo()
    echo_heading("Errors")
    if report.errors:
        for error in report.errors:
            typer.echo(f"  - row {error.row_number}: {error.reason}")
    else:
        typer.echo("No errors recorded.")


def render_written(paths: Iterable[Path]) -> None:
    for path in paths:
        typer.secho(f"  wrote {path}", fg=typer.colors.GREEN)
