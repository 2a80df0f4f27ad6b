from __future__ import annotations

import argparse
import json
import sys

from dotenv import load_dotenv

from trainseed.db.connection import DatabaseUnavailableError, db_cursor
from trainseed.db.lookup import (
    InvalidQueryError,
    find_train_by_tz,
    list_trains_by_class,
    search_trains,
)

"""Query persisted trains from the command line.

    trainseed-retrieve --tz 101
    trainseed-retrieve --query Adler
    trainseed-retrieve --class-id 401
"""


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Look up seeded trains by tz, name or class.")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--tz", help="exact unit number")
    group.add_argument("--query", help="name substring (a number also matches tz)")
    group.add_argument("--class-id", help="list all trains of a class")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    load_dotenv()

    try:
        with db_cursor() as cur:
            if args.tz is not None:
                result = find_train_by_tz(cur, args.tz)
                if result is None:
                    print("Train not found", file=sys.stderr)
                    return 1
            elif args.query is not None:
                result = search_trains(cur, args.query)
            else:
                result = list_trains_by_class(cur, args.class_id)
    except (InvalidQueryError, DatabaseUnavailableError) as e:
        print(str(e), file=sys.stderr)
        return 1

    print(json.dumps(result, ensure_ascii=False, indent=2, default=str))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
