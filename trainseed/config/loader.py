from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..table.columns import DEFAULT_COLUMN_KEYWORDS, DEFAULT_HEADER_KEYWORDS, HEADER_SCAN_ROWS

"""Config loader.

Responsibilities:
- Load YAML config/import.yml
- Validate against config_schema.json (shipped next to this module)
- Apply defaults (output path, file extension, class prefix, keyword tables)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

DEFAULT_OUTPUT_PATH = "./trains.json"
DEFAULT_FILE_EXTENSION = ".csv"
DEFAULT_CLASS_PREFIX = "br-"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection fallback; environment variables take precedence."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    source_directory: str
    output_path: str = DEFAULT_OUTPUT_PATH
    file_extension: str = DEFAULT_FILE_EXTENSION
    class_prefix: str = DEFAULT_CLASS_PREFIX
    header_scan_rows: int = HEADER_SCAN_ROWS
    header_keywords: tuple[str, ...] = DEFAULT_HEADER_KEYWORDS
    column_keywords: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_COLUMN_KEYWORDS)
    )
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (missing keys, wrong types, extra keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    column_keywords = dict(DEFAULT_COLUMN_KEYWORDS)
    for role, keywords in (data.get("column_keywords") or {}).items():
        column_keywords[role] = tuple(keywords)

    return ImportConfig(
        source_directory=data["source_directory"],
        output_path=data.get("output_path", DEFAULT_OUTPUT_PATH),
        file_extension=data.get("file_extension", DEFAULT_FILE_EXTENSION),
        class_prefix=data.get("class_prefix", DEFAULT_CLASS_PREFIX),
        header_scan_rows=data.get("header_scan_rows", HEADER_SCAN_ROWS),
        header_keywords=tuple(data.get("header_keywords") or DEFAULT_HEADER_KEYWORDS),
        column_keywords=column_keywords,
        database=db,
    )
