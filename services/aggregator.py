"""Aggregation of evaluated readings into alert counts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from models.records import Alert


@dataclass
class AlertSummary:
    """Alert statistics for a batch of evaluated readings."""

    reading_count: int = 0
    alerting_readings: int = 0
    alert_count: int = 0
    per_parameter_count: Dict[str, int] = field(default_factory=dict)


class AlertAggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def summarize(self, evaluations: Iterable[List[Alert]]) -> AlertSummary:
        summary = AlertSummary()

        for alerts in evaluations:
            summary.reading_count += 1
            if not alerts:
                continue
            summary.alerting_readings += 1
            summary.alert_count += len(alerts)

            for alert in alerts:
                key = alert.parameter.value
                summary.per_parameter_count[key] = summary.per_parameter_count.get(key, 0) + 1

        return summary
