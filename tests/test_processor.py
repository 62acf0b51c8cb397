from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from models.schemas import ScanStatus
from services.evaluator import WaterQualityChecker
from services.processor import ReadingProcessor, build_processor
from services.thresholds import SALMON, TILAPIA, UnknownSpeciesError


@pytest.fixture()
def processor() -> ReadingProcessor:
    return ReadingProcessor(checker=WaterQualityChecker(SALMON))


def _write(tmp_path: Path, name: str, contents: str) -> Path:
    path = tmp_path / name
    path.write_text(contents, encoding="utf-8")
    return path


def test_process_csv_success(processor: ReadingProcessor, tmp_path) -> None:
    path = _write(
        tmp_path,
        "readings.csv",
        "timestamp,temperature,ph,dissolved_oxygen\n"
        "2026-02-10T00:00:00Z,15.0,7.5,8.0\n"
        "2026-02-10T00:05:00+00:00,22.0,7.5,8.0\n",
    )

    report = processor.process_csv(path)

    assert report.status is ScanStatus.processed
    assert report.species == "salmon"
    assert report.errors == []
    assert [result.row_number for result in report.results] == [2, 3]
    assert report.results[0].alerts == []
    assert report.results[1].alerts == ["Temperature too high: 22.0°C (max: 18.0°C)"]
    assert report.results[0].timestamp == datetime(2026, 2, 10, tzinfo=timezone.utc)
    assert report.summary is not None
    assert report.summary.reading_count == 2
    assert report.summary.alerting_readings == 1
    assert report.summary.per_parameter_count == {"temperature": 1}


def test_process_csv_headers_are_case_insensitive_and_timestamp_optional(
    processor: ReadingProcessor, tmp_path
) -> None:
    path = _write(
        tmp_path,
        "upper.csv",
        "Temperature, PH ,Dissolved_Oxygen\n"
        "11.9,6.4,6.9\n",
    )

    report = processor.process_csv(path)

    assert report.status is ScanStatus.processed
    assert report.results[0].timestamp is None
    assert len(report.results[0].alerts) == 3


def test_process_csv_partial_with_row_errors(processor: ReadingProcessor, tmp_path) -> None:
    path = _write(
        tmp_path,
        "partial.csv",
        "timestamp,temperature,ph,dissolved_oxygen\n"
        "2026-02-10T00:00:00Z,15.0,7.5,8.0\n"
        "2026-02-10T00:05:00Z,,7.5,8.0\n"
        "not-a-time,15.0,7.5,8.0\n"
        "2026-02-10T00:15:00Z,15.0,acidic,8.0\n"
        "2026-02-10T00:20:00Z,15.0,7.5,-1.0\n",
    )

    report = processor.process_csv(path)

    assert report.status is ScanStatus.partial
    assert report.summary is not None
    assert report.summary.reading_count == 1
    reasons = {error.row_number: error.reason for error in report.errors}
    assert reasons[3] == "missing temperature"
    assert reasons[4] == "invalid timestamp"
    assert reasons[5] == "invalid numeric value for ph"
    assert reasons[6].startswith("Dissolved oxygen must be >=")
    assert sorted(reasons) == [3, 4, 5, 6]


def test_process_csv_all_rows_invalid_fails(processor: ReadingProcessor, tmp_path) -> None:
    path = _write(
        tmp_path,
        "bad.csv",
        "temperature,ph,dissolved_oxygen\n"
        "99,7.5,8.0\n",
    )

    report = processor.process_csv(path)

    assert report.status is ScanStatus.failed
    assert report.summary is None
    assert report.results == []
    assert "Temperature must be between" in report.errors[0].reason


def test_process_csv_missing_columns_raises(processor: ReadingProcessor, tmp_path) -> None:
    path = _write(tmp_path, "cols.csv", "temperature,ph\n15.0,7.5\n")

    with pytest.raises(ValueError, match="CSV missing required columns: dissolved_oxygen"):
        processor.process_csv(path)


def test_process_csv_empty_file_raises(processor: ReadingProcessor, tmp_path) -> None:
    path = _write(tmp_path, "empty.csv", "")

    with pytest.raises(ValueError, match="missing a header row"):
        processor.process_csv(path)


def test_process_json_accepts_scenario_shape(processor: ReadingProcessor, tmp_path) -> None:
    payload = {
        "name": "Edge",
        "readings": [
            {"timestamp": "2026-02-10T10:00:00Z", "temperature": 12.0, "ph": 6.5, "dissolved_oxygen": 7.0},
            {"timestamp": "2026-02-10T10:05:00Z", "temperature": 18.1, "ph": 8.6, "dissolved_oxygen": 8.0},
        ],
    }
    path = _write(tmp_path, "scenario.json", json.dumps(payload))

    report = processor.process_json(path)

    assert report.status is ScanStatus.processed
    assert [len(result.alerts) for result in report.results] == [0, 2]


def test_process_json_list_with_bad_items(processor: ReadingProcessor, tmp_path) -> None:
    payload = [
        {"temperature": 15.0, "ph": 7.5, "dissolved_oxygen": 8.0},
        "oops",
        {"temperature": 15.0, "ph": True, "dissolved_oxygen": 8.0},
        {"temperature": "15.5", "ph": 7.5},
    ]
    path = _write(tmp_path, "list.json", json.dumps(payload))

    report = processor.process_json(path)

    assert report.status is ScanStatus.partial
    assert [(error.row_number, error.reason) for error in report.errors] == [
        (2, "row is not an object"),
        (3, "invalid numeric value for ph"),
        (4, "missing dissolved_oxygen"),
    ]


def test_process_json_rejects_unexpected_document(processor: ReadingProcessor, tmp_path) -> None:
    path = _write(tmp_path, "doc.json", json.dumps({"temperature": 15.0}))

    with pytest.raises(ValueError, match="list of readings"):
        processor.process_json(path)


def test_process_json_rejects_malformed_json(processor: ReadingProcessor, tmp_path) -> None:
    path = _write(tmp_path, "broken.json", "{not json")

    with pytest.raises(ValueError, match="Invalid JSON"):
        processor.process_json(path)


def test_process_file_dispatches_on_suffix(processor: ReadingProcessor, tmp_path) -> None:
    csv_path = _write(tmp_path, "a.CSV", "temperature,ph,dissolved_oxygen\n15,7.5,8\n")
    json_path = _write(tmp_path, "a.json", "[]")
    txt_path = _write(tmp_path, "a.txt", "")

    assert processor.process_file(csv_path).status is ScanStatus.processed
    assert processor.process_file(json_path).results == []
    with pytest.raises(ValueError, match="Unsupported file type"):
        processor.process_file(txt_path)


def test_processor_logs_skipped_rows(processor: ReadingProcessor, tmp_path, caplog) -> None:
    path = _write(
        tmp_path,
        "invalid.csv",
        "temperature,ph,dissolved_oxygen\n"
        "15.0,7.5,8.0\n"
        "15.0,7.5,not-a-number\n",
    )

    with caplog.at_level(logging.WARNING):
        processor.process_csv(path)

    records = [record for record in caplog.records if record.name == "services.processor"]
    assert records, "Expected row skip warnings to be logged."
    messages = [record.getMessage() for record in records]
    assert any("Skipping row 3" in message for message in messages)
    assert any(getattr(record, "reason", "") == "invalid numeric value for dissolved_oxygen" for record in records)
    assert any(getattr(record, "source", "").endswith("invalid.csv") for record in records)


def test_build_processor_wires_species(tmp_path) -> None:
    processor = build_processor("Tilapia")

    assert processor.checker.profile is TILAPIA
    with pytest.raises(UnknownSpeciesError):
        build_processor("carp")


def test_process_csv_accepts_byte_order_mark(processor: ReadingProcessor, tmp_path) -> None:
    path = tmp_path / "excel.csv"
    path.write_bytes(
        "temperature,ph,dissolved_oxygen\n22.0,7.5,8.0\n".encode("utf-8-sig")
    )

    report = processor.process_csv(path)

    assert report.status is ScanStatus.processed
    assert report.results[0].alerts == ["Temperature too high: 22.0°C (max: 18.0°C)"]
