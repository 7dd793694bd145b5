"""
Unit Tests for Snapshot Loaders

Tests presence rules, record normalization and file loading.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest
import polars as pl

from eta_risk.classify_risk import classify_risk
from eta_risk.columns import SNAPSHOT_SCHEMA
from eta_risk.data.loaders import (
    as_number,
    as_text,
    normalize_snapshot,
    shipments_to_frame,
    normalize_frame,
    load_snapshots,
)


SAMPLE_PATH = Path(__file__).parent / "data" / "sample_shipments.json"


@pytest.fixture
def samples():
    with open(SAMPLE_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# PRESENCE RULES
# =============================================================================

class TestPresence:
    """Tests for as_number / as_text."""

    @pytest.mark.parametrize("value,expected", [
        (0, 0.0),
        (0.0, 0.0),
        (2, 2.0),
        (-1.5, -1.5),
        (float("inf"), float("inf")),
    ])
    def test_numbers(self, value, expected):
        assert as_number(value) == expected

    @pytest.mark.parametrize("value", [
        None, True, False, "2", "", float("nan"), [1], {"a": 1}, Decimal("2.0"),
    ])
    def test_not_numbers(self, value):
        assert as_number(value) is None

    def test_text(self):
        assert as_text("IL") == "IL"
        assert as_text("") is None
        assert as_text("   ") is None
        assert as_text(44) is None


# =============================================================================
# RECORD NORMALIZATION
# =============================================================================

class TestNormalizeSnapshot:
    """Tests for normalize_snapshot."""

    def test_has_every_column(self, samples):
        row = normalize_snapshot(samples[0])
        assert list(row) == list(SNAPSHOT_SCHEMA)

    def test_sample_values(self, samples):
        row = normalize_snapshot(samples[0])
        assert row["shipment_id"] == "LDG-1029"
        assert row["stage"] == "Linehaul"
        assert row["days_to_eta"] == 2.0
        assert row["weather_index"] == 2.0
        assert row["port_congestion"] == 3.0
        assert row["reason_code"] == ["scan_gap", "excess_dwell"]
        assert row["eta_planned"] == "2025-09-09T18:12:00Z"

    def test_not_a_mapping(self):
        row = normalize_snapshot(["Linehaul", 2])
        assert all(value is None for value in row.values())

    def test_unknown_stage_logged(self, caplog):
        with caplog.at_level("WARNING"):
            row = normalize_snapshot({"shipment_id": "X-1", "stage": "In Orbit"})
        assert row["stage"] is None
        assert "In Orbit" in caplog.text

    def test_external_not_a_mapping(self):
        row = normalize_snapshot({"external": [3, 7]})
        assert row["weather_index"] is None
        assert row["port_congestion"] is None

    def test_datetime_metadata(self):
        ts = datetime(2025, 9, 7, 10, 12, tzinfo=timezone.utc)
        row = normalize_snapshot({"last_update_ts": ts})
        assert row["last_update_ts"] == "2025-09-07T10:12:00+00:00"

    def test_reason_code_keeps_strings_only(self):
        row = normalize_snapshot({"reason_code": ["scan_gap", 3, None]})
        assert row["reason_code"] == ["scan_gap"]

    def test_does_not_mutate_input(self, samples):
        before = json.dumps(samples[0], sort_keys=True)
        normalize_snapshot(samples[0])
        assert json.dumps(samples[0], sort_keys=True) == before


class TestShipmentsToFrame:
    """Tests for shipments_to_frame."""

    def test_schema(self, samples):
        df = shipments_to_frame(samples)
        assert dict(df.schema) == SNAPSHOT_SCHEMA
        assert len(df) == 3

    def test_empty(self):
        df = shipments_to_frame([])
        assert len(df) == 0
        assert dict(df.schema) == SNAPSHOT_SCHEMA

    def test_mixed_valid_and_invalid(self, samples):
        df = shipments_to_frame([samples[0], None, "junk"])
        assert df["shipment_id"].to_list() == ["LDG-1029", None, None]


# =============================================================================
# FRAME NORMALIZATION
# =============================================================================

class TestNormalizeFrame:
    """Tests for normalize_frame."""

    def test_adds_missing_columns(self):
        df = normalize_frame(pl.DataFrame({"stage": ["Customs"]}))
        for col, dtype in SNAPSHOT_SCHEMA.items():
            assert df.schema[col] == dtype

    def test_blank_strings_become_null(self):
        df = normalize_frame(pl.DataFrame({"origin_country": ["", "  ", "US"]}))
        assert df["origin_country"].to_list() == [None, None, "US"]

    def test_unknown_stage_becomes_null(self, caplog):
        with caplog.at_level("WARNING"):
            df = normalize_frame(pl.DataFrame({"stage": ["Customs", "Lost"]}))
        assert df["stage"].to_list() == ["Customs", None]
        assert "Lost" in caplog.text

    def test_categorical_stage(self):
        df = normalize_frame(
            pl.DataFrame({"stage": ["Last-Mile"]}).with_columns(pl.col("stage").cast(pl.Categorical))
        )
        assert df.schema["stage"] == pl.Utf8
        assert df["stage"].to_list() == ["Last-Mile"]

    def test_non_numeric_column_logged(self, caplog):
        with caplog.at_level("WARNING"):
            df = normalize_frame(pl.DataFrame({"scan_gap_hours": ["30"]}))
        assert df["scan_gap_hours"].to_list() == [None]
        assert "scan_gap_hours" in caplog.text

    def test_nested_external_struct(self):
        df = pl.DataFrame({
            "weather_index": [None, 1.0],
            "external": [
                {"weather_index": 4, "port_congestion": 8},
                {"weather_index": 5, "port_congestion": None},
            ],
        })
        df = normalize_frame(df)
        assert df["weather_index"].to_list() == [4.0, 1.0]
        assert df["port_congestion"].to_list() == [8.0, None]

    def test_idempotent(self, samples):
        once = normalize_frame(shipments_to_frame(samples))
        assert normalize_frame(once).equals(once)


# =============================================================================
# FILE LOADERS
# =============================================================================

class TestLoadSnapshots:
    """Tests for load_snapshots."""

    def test_json_array(self):
        df = load_snapshots(SAMPLE_PATH)
        assert df["shipment_id"].to_list() == ["LDG-1029", "LDG-1043", "LDG-1066"]
        assert df["port_congestion"].to_list() == [3.0, 2.0, 1.0]

    def test_json_single_object(self, tmp_path, samples):
        path = tmp_path / "one.json"
        path.write_text(json.dumps(samples[1]), encoding="utf-8")
        assert load_snapshots(path)["shipment_id"].to_list() == ["LDG-1043"]

    def test_json_scalar_rejected(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("42", encoding="utf-8")
        with pytest.raises(ValueError, match="expected a JSON array"):
            load_snapshots(path)

    def test_ndjson(self, tmp_path, samples):
        path = tmp_path / "shipments.ndjson"
        path.write_text("\n".join(json.dumps(s) for s in samples) + "\n\n", encoding="utf-8")
        df = load_snapshots(path)
        assert len(df) == 3
        assert df["stage"].to_list() == ["Linehaul", "Origin Hub", "Last-Mile"]

    def test_csv(self, tmp_path):
        path = tmp_path / "shipments.csv"
        path.write_text(
            "shipment_id,origin_iata,destination_iata,stage,days_to_eta,scan_gap_hours,"
            "dwell_hours_current,baseline_90pct_hours,weather_index,port_congestion,reason_code\n"
            "1029,TLV,LHR,Linehaul,2,28,11.0,9.8,2,3,scan_gap;excess_dwell\n"
            "1043,JFK,SFO,Origin Hub,1,6,2.5,,,,early_stage_near_eta\n",
            encoding="utf-8",
        )
        df = load_snapshots(path)
        assert df["shipment_id"].to_list() == ["1029", "1043"]
        assert df["days_to_eta"].to_list() == [2.0, 1.0]
        assert df["baseline_90pct_hours"].to_list() == [9.8, None]
        assert df["reason_code"].to_list() == [["scan_gap", "excess_dwell"], ["early_stage_near_eta"]]

    def test_csv_bad_numeric_cell(self, tmp_path):
        """An unparseable cell is absent for its row only."""
        path = tmp_path / "shipments.csv"
        path.write_text(
            "shipment_id,stage,days_to_eta,scan_gap_hours\n"
            "A,Linehaul,1,30\n"
            "B,Linehaul,n/a, 4 \n",
            encoding="utf-8",
        )
        df = load_snapshots(path)
        assert df.schema["days_to_eta"] == pl.Float64
        assert df["days_to_eta"].to_list() == [1.0, None]
        assert df["scan_gap_hours"].to_list() == [30.0, 4.0]

        result = classify_risk(df)
        assert result["at_risk"].to_list() == [True, False]

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "shipments.xlsx"
        path.write_bytes(b"")
        with pytest.raises(ValueError, match="Unsupported snapshot file"):
            load_snapshots(path)
