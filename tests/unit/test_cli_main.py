from __future__ import annotations
import json
from pathlib import Path
from trainseed.cli import main as cli_main
from trainseed.logging.init import reset_logging


def test_cli_no_files_success(write_config, temp_workdir: Path, capsys, monkeypatch):
    reset_logging()
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert 'SUMMARY files=0/0 success=0 failed=0 skipped=0 records=0' in out
    assert json.loads((temp_workdir / "out" / "trains.json").read_text(encoding="utf-8")) == []


def test_cli_writes_records_json(write_config, write_source, br401_csv, temp_workdir: Path, capsys, monkeypatch):
    reset_logging()
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    write_source("br-401.csv", br401_csv)
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO Processing br-401.csv..." in out
    assert "INFO   Extracted 3 records" in out
    assert "INFO Total records: 3" in out
    data = json.loads((temp_workdir / "out" / "trains.json").read_text(encoding="utf-8"))
    assert [(d["tz"], d["name"], d["isActive"]) for d in data] == [
        ("101", "Adler", False),
        ("101", "Falke", True),
        ("102", "Berlin", False),
    ]
    # clean run leaves no diagnostics behind
    assert list((temp_workdir / "logs").iterdir()) == []


def test_cli_directory_missing(write_config, temp_workdir: Path, capsys):
    reset_logging()
    cfg_path = temp_workdir / 'config' / 'import.yml'
    text = cfg_path.read_text(encoding='utf-8').replace('./data', './missing_dir')
    cfg_path.write_text(text, encoding='utf-8')
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert 'ERROR directory not found:' in out


def test_cli_config_missing(temp_workdir: Path, capsys):
    reset_logging()
    code = cli_main([])
    assert code == 1
    assert "ERROR config: config file not found" in capsys.readouterr().out


def test_cli_config_option(temp_workdir: Path, sample_config_yaml: str, capsys, monkeypatch):
    reset_logging()
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    alt = temp_workdir / "alt.yml"
    alt.write_text(sample_config_yaml, encoding="utf-8")
    assert cli_main(["--config", str(alt)]) == 0
    assert "SUMMARY files=0/0" in capsys.readouterr().out


def test_cli_failed_file_partial_exit(write_config, write_source, br401_csv, temp_workdir: Path, capsys, monkeypatch):
    reset_logging()
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    write_source("br-401.csv", br401_csv)
    (temp_workdir / "data" / "br-499.csv").write_bytes(b"\xff\xfe\xfa")
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 2
    assert "SUMMARY files=2/2 success=1 failed=1 skipped=0 records=3" in out
    assert "WARN diagnostics written to:" in out
    [log_file] = (temp_workdir / "logs").iterdir()
    assert json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])["error_type"] == "PROCESSING_ERROR"


def test_cli_skipped_file_is_not_a_failure(write_config, write_source, temp_workdir: Path, capsys, monkeypatch):
    reset_logging()
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    write_source("br-405.csv", "Triebzug\n")
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "skipped=1" in out
