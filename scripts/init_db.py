"""Create the database if needed and apply database/schema.sql (idempotent)."""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timekeeping.timekeeping.database.bootstrap import apply_schema, list_tables


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--env", default=None, help="settings to use (default: APP_ENV)")
    parser.add_argument("--schema", type=Path, default=REPO_ROOT / "database" / "schema.sql")
    parser.add_argument("--show-tables", action="store_true")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module(args.env))
    db_config = dict(settings.DB_CONFIG)

    applied = apply_schema(db_config, schema_path=args.schema)
    tables = list_tables(db_config)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    print(f"{args.schema.name}: {applied} statement(s) applied to {target}, {len(tables)} table(s)")
    if args.show_tables:
        for name in tables:
            print(f"  {name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
