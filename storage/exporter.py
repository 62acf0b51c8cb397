"""File export of generated sensor scenarios."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping

from models.schemas import Scenario

logger = logging.getLogger(__name__)

JSON_FILENAME = "sensor_test_data.json"
CSV_COLUMNS = ("timestamp", "temperature", "ph", "dissolved_oxygen")


class ScenarioExporter:
    """Writes generated scenarios below ``root_path`` as JSON and CSV."""

    def __init__(self, root_path: Path) -> None:
        self.root_path = root_path

    def export_json(self, scenarios: Mapping[str, Scenario], filename: str = JSON_FILENAME) -> Path:
        path = self._target(filename)
        payload = {key: scenario.model_dump(mode="json") for key, scenario in scenarios.items()}
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Exported %d scenarios", len(scenarios), extra={"path": str(path)})
        return path

    def export_csv(self, scenario: Scenario, filename: str) -> Path:
        path = self._target(filename)
        with path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.writer(handle)
            writer.writerow(CSV_COLUMNS)
            for reading in scenario.readings:
                writer.writerow(
                    [reading.timestamp, reading.temperature, reading.ph, reading.dissolved_oxygen]
                )
        logger.info(
            "Exported scenario %r",
            scenario.name,
            extra={"path": str(path), "row_count": len(scenario.readings)},
        )
        return path

    def export_all(self, scenarios: Mapping[str, Scenario], include_csv: bool = True) -> List[Path]:
        """Write the combined JSON file plus one ``sensor_data_<key>.csv`` per scenario."""
        written = [self.export_json(scenarios)]
        if include_csv:
            for key, scenario in scenarios.items():
                if not scenario.readings:
                    continue
                written.append(self.export_csv(scenario, f"sensor_data_{key}.csv"))
        return written

    def _target(self, filename: str) -> Path:
        path = self.root_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        return path
