from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

from trainseed.cli import main as cli_main
from trainseed.db.connection import DatabaseUnavailableError
from trainseed.logging.init import reset_logging
from trainseed.models.train_record import TrainRecord
from trainseed.services.export import write_records_json


class DummyCtx:
    def __init__(self, cursor):
        self.cursor = cursor
    def __enter__(self):
        return self.cursor
    def __exit__(self, exc_type, exc, tb):
        return False


RECORDS = [
    TrainRecord("401", "101", "Adler", "01.01.1990", until="31.12.1999", is_active=False),
    TrainRecord("401", "101", "Falke", "01.01.2000"),
    TrainRecord("401", "102", "Berlin", "05.06.1991", until="03.05.2012", is_active=False),
]


def _records_file(temp_workdir: Path) -> Path:
    return write_records_json(RECORDS, temp_workdir / "out" / "trains.json")


def test_seed_from_json_skips_extraction(temp_workdir: Path, write_config: Path, write_source, capsys, monkeypatch):
    """Seeds the records file; sources under ./data are not read."""
    reset_logging()
    monkeypatch.delenv("DISABLE_DB_CONNECT", raising=False)
    path = _records_file(temp_workdir)
    write_source("br-499.csv", "Triebzug\n")
    cursor = MagicMock()
    inserted: list[tuple] = []

    def fake_execute_values(cursor, sql, rows, page_size=1000):
        inserted.extend(rows)

    with patch('trainseed.cli.__main__.db_cursor', return_value=DummyCtx(cursor)), \
         patch('trainseed.db.batch_insert.execute_values', fake_execute_values):
        code = cli_main(["--seed-from", str(path)])

    out = capsys.readouterr().out
    assert code == 0
    assert f"Loaded 3 records from: {path}" in out
    assert "mode=live seeded=3 skipped=0" in out
    assert "SUMMARY" not in out
    cursor.execute.assert_called_once_with("DELETE FROM trains")
    assert [row[1] for row in inserted] == ["Adler", "Falke", "Berlin"]


def test_seed_from_missing_file(temp_workdir: Path, write_config: Path, capsys):
    reset_logging()
    assert cli_main(["--seed-from", "out/missing.json"]) == 1
    assert "ERROR seed-from: cannot read out/missing.json" in capsys.readouterr().out


def test_seed_from_malformed_file(temp_workdir: Path, write_config: Path, capsys):
    reset_logging()
    (temp_workdir / "broken.json").write_text('[{"tz": "1"', encoding="utf-8")
    assert cli_main(["--seed-from", "broken.json"]) == 1
    assert "ERROR seed-from: cannot read broken.json" in capsys.readouterr().out


def test_seed_from_database_unavailable(temp_workdir: Path, write_config: Path, capsys, monkeypatch):
    """Without a database nothing can be seeded, so the run fails."""
    reset_logging()
    monkeypatch.delenv("DISABLE_DB_CONNECT", raising=False)
    path = _records_file(temp_workdir)

    with patch('trainseed.cli.__main__.db_cursor', side_effect=DatabaseUnavailableError("connection refused")):
        code = cli_main(["--seed-from", str(path)])

    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR DB connection failed: connection refused" in out


def test_seed_from_db_connect_disabled(temp_workdir: Path, write_config: Path, capsys, monkeypatch):
    reset_logging()
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    path = _records_file(temp_workdir)

    with patch('trainseed.cli.__main__.db_cursor') as cursor_factory:
        assert cli_main(["--seed-from", str(path)]) == 0

    cursor_factory.assert_not_called()
    assert "nothing seeded" in capsys.readouterr().out
