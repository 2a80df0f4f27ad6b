# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from trainseed.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_path: ./out/trains.json
class_prefix: br-
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_source(temp_workdir: Path) -> Callable[[str, str], Path]:
    """Write a CSV export into ./data and return its path."""
    def _write(name: str, content: str) -> Path:
        p = temp_workdir / "data" / name
        p.write_text(content, encoding="utf-8")
        return p
    return _write


@pytest.fixture()
def clean_logging():
    reset_logging()
    yield
    reset_logging()


# Header + two units; the first cell of each row is a quoted multi-line name history.
BR401_CSV = (
    'Triebzug,Abnahme,Ausmusterung,Bemerkung\n'
    '"Tz 101\nAdler\n(von 01.01.1990 bis 31.12.1999)\nFalke\n(seit 01.01.2000)",'
    '"12. März 1990",,"Unfall 2005,\nrepariert"\n'
    '"Tz 102\nBerlin",5.6.1991,"Ausmusterung\nverschrottet 3. Mai 2012",\n'
)


@pytest.fixture()
def br401_csv() -> str:
    return BR401_CSV
