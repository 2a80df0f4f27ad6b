#!/usr/bin/env python3
"""Dataset generation script for performance testing.

Generates synthetic class exports (``br-<class>.csv``) in the layout the
extractor expects:
- Row 1: Title row (skipped by header detection)
- Row 2: Header row (Triebzug / Abnahme / Ausmusterung / Bemerkung)
- Row 3+: One row per unit with a multi-line name history cell
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

HEADER = ["Triebzug", "Abnahme", "Ausmusterung", "Bemerkung"]
CITY_NAMES = [
    "Aachen", "Bamberg", "Celle", "Dessau", "Erfurt", "Fulda", "Gotha", "Hameln",
    "Ingolstadt", "Jena", "Kassel", "Lübeck", "Minden", "Neuss", "Oldenburg", "Passau",
]
MONTH_NAMES = ["Januar", "Februar", "März", "April", "Mai", "Juni", "Juli", "August"]


def _date(rng: np.random.Generator, year_from: int, year_to: int) -> tuple[int, int, int]:
    return int(rng.integers(1, 29)), int(rng.integers(1, 13)), int(rng.integers(year_from, year_to))


def generate_units(units: int, seed: int = 42) -> pd.DataFrame:
    """Synthetic unit rows: one to three names per unit, mixed date spellings."""
    rng = np.random.default_rng(seed)
    rows: list[list[str]] = []
    for tz in range(1, units + 1):
        lines = [f"Tz {100 + tz}"]
        n_names = int(rng.integers(1, 4))
        year = int(rng.integers(1985, 2000))
        for i in range(n_names):
            name = CITY_NAMES[int(rng.integers(0, len(CITY_NAMES)))]
            lines.append(name)
            if i < n_names - 1:
                lines.append(f"(von 01.01.{year} bis 31.12.{year + 4})")
                year += 5
            else:
                lines.append(f"(seit 01.01.{year})")
        day, month, first_year = _date(rng, 1985, 2000)
        since = f"{day}. {MONTH_NAMES[month % len(MONTH_NAMES)]} {first_year}"
        until = ""
        if rng.random() < 0.2:
            until = "Ausmusterung {:02d}.{:02d}.{}".format(*_date(rng, 2010, 2024))
        comment = "Unfall, repariert" if rng.random() < 0.1 else ""
        rows.append(["\n".join(lines), since, until, comment])
    return pd.DataFrame(rows, columns=HEADER)


def create_class_file(output_path: Path, units: int, title: str = "Performance Test Data", seed: int = 42) -> Path:
    """Write one class export with a title row above the header."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df = generate_units(units, seed)
    with output_path.open("w", encoding="utf-8", newline="") as f:
        f.write(f"{title}\n")
        df.to_csv(f, index=False, lineterminator="\n")
    return output_path


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate synthetic train class exports for performance testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 10 classes with 500 units each
  %(prog)s ./perf-data --classes 10 --units 500
""",
    )
    parser.add_argument("output_dir", type=Path, help="Directory for the generated br-*.csv files")
    parser.add_argument("--classes", type=int, default=5, help="Number of class files (default: 5)")
    parser.add_argument("--units", type=int, default=1000, help="Units per class file (default: 1000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.classes <= 0 or args.units <= 0:
        print("Error: --classes and --units must be positive", file=sys.stderr)
        return 1

    for i in range(args.classes):
        path = create_class_file(args.output_dir / f"br-{401 + i}.csv", args.units, seed=args.seed + i)
        print(f"Created class file: {path} ({args.units} units)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
