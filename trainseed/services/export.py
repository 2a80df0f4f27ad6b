from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from ..models.train_record import TrainRecord

"""JSON export of extracted records (input of the seeding step)."""


def write_records_json(records: Iterable[TrainRecord], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [r.to_dict() for r in records]
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    return path


def read_records_json(path: Path) -> list[TrainRecord]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return [TrainRecord.from_dict(item) for item in data]
