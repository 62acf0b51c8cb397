"""Synthetic sensor scenarios for exercising the rule evaluator."""

from __future__ import annotations

import logging
import math
import random
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from models.records import SensorReading
from models.schemas import Scenario, ScenarioReading
from services.evaluator import evaluate
from services.thresholds import get_profile

logger = logging.getLogger(__name__)

BASE_TIME = datetime(2026, 2, 10, tzinfo=timezone.utc)
SAMPLE_INTERVAL_MINUTES = 5


def timestamp_for_minute(minutes: int) -> str:
    return (BASE_TIME + timedelta(minutes=minutes)).isoformat()


def _row(index: int, temperature: float, ph: float, dissolved_oxygen: float) -> ScenarioReading:
    return ScenarioReading(
        timestamp=timestamp_for_minute(index * SAMPLE_INTERVAL_MINUTES),
        temperature=round(temperature, 2),
        ph=round(ph, 2),
        dissolved_oxygen=round(dissolved_oxygen, 2),
    )


def count_alerts(reading: ScenarioReading, species: str) -> int:
    """Number of alerts a generated row raises for ``species``."""
    sensor_reading = SensorReading(
        temperature=reading.temperature,
        ph=reading.ph,
        dissolved_oxygen=reading.dissolved_oxygen,
    )
    return len(evaluate(sensor_reading, get_profile(species).thresholds()))


def annotate(scenario: Scenario) -> Scenario:
    """Fill in the alert expectations from the current species thresholds."""
    if scenario.species:
        counts = [count_alerts(reading, scenario.species) for reading in scenario.readings]
        scenario.expected_alerts = sum(counts)
        scenario.alerting_readings = sum(1 for count in counts if count)
    for species in list(scenario.species_expectations):
        scenario.species_expectations[species] = [
            count_alerts(reading, species) for reading in scenario.readings
        ]
    return scenario


class SensorDataGenerator:
    """Builds the standard set of tank scenarios.

    Random jitter comes from a private ``random.Random`` so a fixed ``seed``
    reproduces the exact same readings.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._random = random.Random(seed)

    def generate_all_scenarios(self) -> Dict[str, Scenario]:
        builders: Dict[str, Callable[[], Scenario]] = {
            "normal_operations": self.normal_operations,
            "temperature_spike": self.temperature_spike,
            "oxygen_depletion": self.oxygen_depletion,
            "ph_drift": self.ph_drift,
            "multiple_failures": self.multiple_failures,
            "species_comparison": self.species_comparison,
            "edge_cases": self.edge_cases,
            "daily_cycle": self.daily_cycle,
        }
        scenarios: Dict[str, Scenario] = {}
        for key, build in builders.items():
            scenario = annotate(build())
            logger.debug(
                "Generated %d readings",
                len(scenario.readings),
                extra={"scenario": key, "alert_count": scenario.expected_alerts},
            )
            scenarios[key] = scenario
        return scenarios

    def _jitter(self, spread: float) -> float:
        return self._random.uniform(-spread, spread)

    def normal_operations(self) -> Scenario:
        readings = [
            _row(i, 14.0 + self._jitter(1.0), 7.5 + self._jitter(0.2), 8.0 + self._jitter(0.5))
            for i in range(288)
        ]
        return Scenario(
            name="Normal Operations - Salmon Tank",
            description="24 hours of normal sensor readings. All parameters within safe range.",
            species="salmon",
            readings=readings,
        )

    def temperature_spike(self) -> Scenario:
        readings: List[ScenarioReading] = []
        for i in range(24):
            readings.append(_row(i, 15.0, 7.5, 8.0))
        # Heater stuck on: +0.5°C every sample.
        for i in range(24, 36):
            readings.append(_row(i, 15.0 + (i - 24) * 0.5, 7.5, 8.0))
        for i in range(36, 48):
            readings.append(_row(i, 21.0, 7.5, 8.0))
        return Scenario(
            name="Equipment Failure - Temperature Spike",
            description="Heater malfunction causes dangerous temperature rise over 1 hour",
            species="salmon",
            readings=readings,
        )

    def oxygen_depletion(self) -> Scenario:
        readings: List[ScenarioReading] = []
        for i in range(24):
            readings.append(_row(i, 15.0, 7.5, 8.0))
        for i in range(24, 48):
            readings.append(_row(i, 15.0, 7.5, max(8.0 - (i - 24) * 0.2, 4.0)))
        return Scenario(
            name="Aerator Failure - Oxygen Depletion",
            description="Aerator stops working, dissolved oxygen drops dangerously low",
            species="salmon",
            readings=readings,
        )

    def ph_drift(self) -> Scenario:
        readings = [_row(i, 15.0, min(7.5 + i * 0.02, 10.0), 8.0) for i in range(96)]
        return Scenario(
            name="Buffer Exhaustion - pH Drift",
            description="pH buffer depleted, pH slowly drifts to dangerous levels",
            species="salmon",
            readings=readings,
        )

    def multiple_failures(self) -> Scenario:
        readings: List[ScenarioReading] = []
        for i in range(12):
            readings.append(_row(i, 15.0, 7.5, 8.0))
        # Power failure: no heater, no aerator, pH spikes.
        for i in range(12, 24):
            readings.append(
                _row(
                    i,
                    10.0 + self._jitter(1.0),
                    9.0 + self._jitter(0.2),
                    3.0 + self._jitter(0.5),
                )
            )
        return Scenario(
            name="Catastrophic Failure - All Systems Down",
            description="Power failure causes all life support systems to fail",
            species="salmon",
            readings=readings,
        )

    def species_comparison(self) -> Scenario:
        readings = [
            _row(0, 15.0, 7.5, 8.0),
            _row(1, 28.0, 8.0, 6.0),
            _row(2, 10.0, 7.0, 5.0),
        ]
        return Scenario(
            name="Species Comparison",
            description="Same readings tested against different species thresholds",
            readings=readings,
            species_expectations={"salmon": [], "tilapia": []},
        )

    def edge_cases(self) -> Scenario:
        readings = [
            _row(0, 12.0, 6.5, 7.0),
            _row(1, 18.0, 8.5, 15.0),
            _row(2, 11.9, 6.4, 6.9),
            _row(3, 18.1, 8.6, 8.0),
        ]
        return Scenario(
            name="Edge Cases and Boundaries",
            description="Testing exact threshold boundaries",
            species="salmon",
            readings=readings,
        )

    def daily_cycle(self) -> Scenario:
        readings: List[ScenarioReading] = []
        for i in range(288):
            hour = i * SAMPLE_INTERVAL_MINUTES / 60.0
            wave = math.sin((hour - 6) * math.pi / 12)
            readings.append(
                _row(
                    i,
                    15.0 + 1.5 * wave,
                    7.5 + 0.2 * wave,
                    8.0 - 0.3 * wave + self._jitter(0.1),
                )
            )
        return Scenario(
            name="Daily Cycle - Natural Variations",
            description="24-hour cycle with natural daily variations (all within safe range)",
            species="salmon",
            readings=readings,
        )
