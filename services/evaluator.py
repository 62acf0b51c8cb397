"""Rule evaluation of sensor readings against species thresholds."""

from __future__ import annotations

import logging
from typing import List

from models.records import Alert, Direction, Parameter, SensorReading
from services.formatter import format_alert
from services.thresholds import ThresholdProvider, ThresholdTable

logger = logging.getLogger(__name__)

PARAMETER_ORDER = (Parameter.temperature, Parameter.ph, Parameter.dissolved_oxygen)


def evaluate(reading: SensorReading, thresholds: ThresholdTable) -> List[Alert]:
    """Return one alert per violated bound, in parameter order.

    Bounds are inclusive: a value equal to its minimum or maximum is safe.
    Parameters missing from ``thresholds`` are not checked.
    """
    alerts: List[Alert] = []
    for parameter in PARAMETER_ORDER:
        limits = thresholds.get(parameter)
        if limits is None:
            continue
        value = reading.value_of(parameter)

        if limits.minimum is not None and value < limits.minimum:
            alerts.append(
                Alert(parameter=parameter, direction=Direction.too_low, value=value, bound=limits.minimum)
            )
        elif limits.maximum is not None and value > limits.maximum:
            alerts.append(
                Alert(parameter=parameter, direction=Direction.too_high, value=value, bound=limits.maximum)
            )
    return alerts


def alert_messages(reading: SensorReading, thresholds: ThresholdTable) -> List[str]:
    return [format_alert(alert) for alert in evaluate(reading, thresholds)]


class WaterQualityChecker:
    """Checks readings against the thresholds of a single species profile."""

    def __init__(self, profile: ThresholdProvider) -> None:
        self.profile = profile

    def evaluate(self, reading: SensorReading) -> List[Alert]:
        return evaluate(reading, self.profile.thresholds())

    def check(self, reading: SensorReading) -> List[str]:
        """Return alert messages for the reading, empty when every parameter is safe."""
        alerts = self.evaluate(reading)
        if alerts:
            logger.debug(
                "Reading violates %d bound(s)",
                len(alerts),
                extra={"species": getattr(self.profile, "name", None), "alert_count": len(alerts)},
            )
        return [format_alert(alert) for alert in alerts]
