"""Ingestion of CSV/JSON sensor exports into evaluated scan reports."""

from __future__ import annotations

import csv
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from models.records import InvalidReadingError, SensorReading
from models.schemas import AlertCounts, ReadingResult, RowError, ScanReport, ScanStatus
from services.aggregator import AlertAggregator
from services.evaluator import WaterQualityChecker
from services.formatter import format_alert
from services.thresholds import get_profile

logger = logging.getLogger(__name__)

READING_FIELDS = ("temperature", "ph", "dissolved_oxygen")

_Row = Tuple[int, Mapping[str, Any]]


class ReadingProcessor:
    """Parses sensor exports row by row and evaluates every valid reading."""

    def __init__(
        self,
        checker: WaterQualityChecker,
        aggregator: Optional[AlertAggregator] = None,
    ) -> None:
        self.checker = checker
        self.aggregator = aggregator or AlertAggregator()

    @property
    def species(self) -> str:
        return getattr(self.checker.profile, "name", type(self.checker.profile).__name__)

    def process_file(self, path: Path) -> ScanReport:
        """Dispatch on file suffix to the CSV or JSON reader."""
        suffix = path.suffix.lower()
        if suffix == ".csv":
            return self.process_csv(path)
        if suffix == ".json":
            return self.process_json(path)
        raise ValueError(f"Unsupported file type {suffix or '(none)'!r}; expected .csv or .json.")

    def process_csv(self, path: Path) -> ScanReport:
        with path.open("r", encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle)
            if not reader.fieldnames:
                raise ValueError("CSV file is missing a header row.")

            normalized = {name.lower().strip(): name for name in reader.fieldnames if name}
            missing = sorted(set(READING_FIELDS) - normalized.keys())
            if missing:
                raise ValueError(f"CSV missing required columns: {', '.join(missing)}")

            rows: List[_Row] = []
            for row_number, row in enumerate(reader, start=2):
                rows.append(
                    (
                        row_number,
                        {key: row.get(column) for key, column in normalized.items()},
                    )
                )

        return self._process_rows(str(path), rows)

    def process_json(self, path: Path) -> ScanReport:
        try:
            payload = json.loads(path.read_text(encoding="utf-8") or "null")
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path.name}: {exc.msg}") from exc

        if isinstance(payload, dict) and isinstance(payload.get("readings"), list):
            items = payload["readings"]
        elif isinstance(payload, list):
            items = payload
        else:
            raise ValueError(
                "JSON export must be a list of readings or an object with a 'readings' list."
            )

        rows: List[_Row] = []
        errors: List[RowError] = []
        for row_number, item in enumerate(items, start=1):
            if not isinstance(item, dict):
                errors.append(self._skip(str(path), row_number, "row is not an object"))
                continue
            rows.append((row_number, item))

        return self._process_rows(str(path), rows, errors)

    def _process_rows(
        self,
        source: str,
        rows: Iterable[_Row],
        errors: Optional[List[RowError]] = None,
    ) -> ScanReport:
        errors = list(errors or [])
        readings: List[Tuple[int, SensorReading]] = []

        for row_number, row in rows:
            outcome = self._build_reading(row)
            if isinstance(outcome, str):
                errors.append(self._skip(source, row_number, outcome))
                continue
            readings.append((row_number, outcome))

        results: List[ReadingResult] = []
        evaluations = []
        for row_number, reading in readings:
            alerts = self.checker.evaluate(reading)
            evaluations.append(alerts)
            results.append(
                ReadingResult(
                    row_number=row_number,
                    timestamp=reading.timestamp,
                    alerts=[format_alert(alert) for alert in alerts],
                )
            )

        totals = self.aggregator.summarize(evaluations)
        summary: Optional[AlertCounts] = AlertCounts(
            reading_count=totals.reading_count,
            alerting_readings=totals.alerting_readings,
            alert_count=totals.alert_count,
            per_parameter_count=dict(totals.per_parameter_count),
        )

        if not results and errors:
            status = ScanStatus.failed
            summary = None
        elif errors:
            status = ScanStatus.partial
        else:
            status = ScanStatus.processed

        errors.sort(key=lambda error: error.row_number)
        logger.info(
            "Scanned sensor export",
            extra={
                "source": source,
                "species": self.species,
                "status": status.value,
                "row_count": len(results),
                "alert_count": totals.alert_count,
            },
        )
        return ScanReport(
            source=source,
            species=self.species,
            status=status,
            results=results,
            errors=errors,
            summary=summary,
        )

    def _build_reading(self, row: Mapping[str, Any]) -> Union[SensorReading, str]:
        """Return a reading, or the reason the row was rejected."""
        values: Dict[str, float] = {}
        for name in READING_FIELDS:
            raw = row.get(name)
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                return f"missing {name}"
            try:
                values[name] = self._parse_number(raw)
            except ValueError:
                return f"invalid numeric value for {name}"

        timestamp: Optional[datetime] = None
        timestamp_raw = row.get("timestamp")
        if isinstance(timestamp_raw, str):
            if timestamp_raw.strip():
                try:
                    timestamp = self._parse_timestamp(timestamp_raw)
                except ValueError:
                    return "invalid timestamp"
        elif timestamp_raw is not None:
            return "invalid timestamp"

        try:
            return SensorReading(timestamp=timestamp, **values)
        except InvalidReadingError as exc:
            return str(exc)

    @staticmethod
    def _skip(source: str, row_number: int, reason: str) -> RowError:
        logger.warning(
            "Skipping row %d: %s",
            row_number,
            reason,
            extra={"source": source, "row_number": row_number, "reason": reason},
        )
        return RowError(row_number=row_number, reason=reason)

    @staticmethod
    def _parse_number(value: Any) -> float:
        if isinstance(value, bool):
            raise ValueError("Booleans are not numeric readings.")
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            return float(value.strip())
        raise ValueError(f"Unsupported value type {type(value).__name__}.")

    @staticmethod
    def _parse_timestamp(value: str) -> datetime:
        candidate = value.strip()
        if not candidate:
            raise ValueError("Timestamp is empty.")

        if candidate.endswith("Z"):
            candidate = candidate[:-1] + "+00:00"

        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError as exc:
            raise ValueError("Invalid timestamp format") from exc

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)

        return parsed.astimezone(timezone.utc)


def build_processor(species: str) -> ReadingProcessor:
    """Factory that wires a processor for a registered species."""
    return ReadingProcessor(checker=WaterQualityChecker(get_profile(species)))
