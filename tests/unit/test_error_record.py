from __future__ import annotations

import json

from trainseed.models.error_record import ErrorRecord

"""Unit tests for the ErrorRecord model."""


def test_error_record_file_level_row():
    """row=-1 marks a file-level error."""
    rec = ErrorRecord.create(
        file="br-499.csv",
        row=-1,
        error_type="PROCESSING_ERROR",
        message="'utf-8' codec can't decode byte",
    )
    assert rec.row == -1
    data = json.loads(rec.to_json_line())
    assert data["row"] == -1
    assert data["file"] == "br-499.csv"
    assert data["error_type"] == "PROCESSING_ERROR"
    assert "timestamp" in data and data["timestamp"].endswith("Z")
    assert set(data.keys()) == {"timestamp", "file", "row", "error_type", "message"}


def test_error_record_keeps_non_ascii():
    rec = ErrorRecord.create("br-401.csv", 7, "MISSING_TZ", "no Tz number in first column: 'Außer Dienst'")
    line = rec.to_json_line()
    assert "Außer Dienst" in line
    assert json.loads(line)["row"] == 7
