"""Standalone database bootstrapper.

Applies the schema script and seeds the faculty table when it is empty.
The same routine runs on API startup; this entry point lets deployments
prepare the database ahead of time.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Sequence

from .config import settings
from .db import bootstrap_database, reset_database_engine
from .logging_utils import configure_logging

logger = logging.getLogger("faculty.init_db")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Apply the faculty schema and seed initial rows")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy URL (defaults to DATABASE_URL)")
    parser.add_argument("--schema", type=Path, default=settings.schema_path)
    parser.add_argument("--seed", type=Path, default=settings.seed_path)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.database_url:
        reset_database_engine(args.database_url)

    try:
        result = bootstrap_database(schema_path=args.schema, seed_path=args.seed)
    except Exception:
        logger.exception("DB init failed", extra={"event": "bootstrap_failed"})
        return 1

    if result.source == "skipped":
        print("Faculty table already has data; skipping seeding")
    elif result.source == "seed_file":
        print(f"Seeded {result.inserted} faculty rows from {args.seed.name}")
    else:
        print(f"Seeded {result.inserted} faculty rows (fallback)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
