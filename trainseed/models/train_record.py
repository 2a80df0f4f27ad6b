from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

"""TrainRecord / NameWithDates models for the train-name history extractor.

NameWithDates is the transient result of reading one "name history" cell;
TrainRecord is the final output unit handed to the JSON writer and the
database seeder.
"""

__all__ = [
    "NameWithDates",
    "TrainRecord",
]


@dataclass(frozen=True)
class NameWithDates:
    """One name found in a name-history cell.

    Dates are canonical ``DD.MM.YYYY`` or the raw text when normalization failed.
    ``dated`` is True when the tuple came from a date-range line; its ``until``
    is then authoritative (None means the name is still active).
    """
    name: str
    since: str | None = None
    until: str | None = None
    dated: bool = False


@dataclass(frozen=True)
class TrainRecord:
    """Final record for one name of one unit (tz) within a class."""
    class_id: str
    tz: str
    name: str
    since: str
    until: str | None = None
    comment: str | None = None
    is_active: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape consumed by the seeding step.

        Optional keys (nameUntil, comment) are omitted when absent.
        """
        data: dict[str, Any] = {
            "classId": self.class_id,
            "tz": self.tz,
            "name": self.name,
            "nameSince": self.since,
        }
        if self.until is not None:
            data["nameUntil"] = self.until
        if self.comment is not None:
            data["comment"] = self.comment
        data["isActive"] = self.is_active
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> TrainRecord:
        until = data.get("nameUntil")
        return TrainRecord(
            class_id=str(data["classId"]),
            tz=str(data["tz"]),
            name=data["name"],
            since=data.get("nameSince", ""),
            until=until,
            comment=data.get("comment"),
            is_active=until is None,
        )

    def to_json_line(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
