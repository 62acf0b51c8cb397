"""Rendering of alert records into operator-facing messages."""

from __future__ import annotations

from models.records import Alert, Direction, Parameter


_DISPLAY_NAMES = {
    Parameter.temperature: "Temperature",
    Parameter.ph: "pH",
    Parameter.dissolved_oxygen: "Dissolved oxygen",
}

_UNITS = {
    Parameter.temperature: "°C",
    Parameter.ph: "",
    Parameter.dissolved_oxygen: "mg/L",
}


def display_name(parameter: Parameter) -> str:
    return _DISPLAY_NAMES.get(parameter, parameter.value.replace("_", " ").capitalize())


def unit_for(parameter: Parameter) -> str:
    return _UNITS.get(parameter, "")


def format_alert(alert: Alert) -> str:
    """Render e.g. ``Temperature too high: 22.0°C (max: 18.0°C)``."""
    name = display_name(alert.parameter)
    unit = unit_for(alert.parameter)
    if alert.direction is Direction.too_low:
        label, limit = "too low", "min"
    else:
        label, limit = "too high", "max"
    return f"{name} {label}: {alert.value}{unit} ({limit}: {alert.bound}{unit})"
