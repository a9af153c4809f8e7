"""End-of-day job: finalize a date's attendances and wait for their work-hour batch.

Meant for a nightly cron, e.g. `python scripts/finalize_day.py --processed-by 1`
(defaults to yesterday).
"""

from __future__ import annotations

import argparse
import importlib
import sys
from datetime import date, timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timekeeping.timekeeping.common.datetime_utils import parse_iso_date
from src.timekeeping.timekeeping.common.logging import configure_logging
from src.timekeeping.timekeeping.main import settings_dict
from src.timekeeping.timekeeping.container import build_container


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--date", dest="work_date", default=None, help="YYYY-MM-DD (default: yesterday)")
    parser.add_argument("--processed-by", type=int, required=True, help="user id recorded as processor")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    work_date = parse_iso_date(args.work_date) if args.work_date else date.today() - timedelta(days=1)
    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings_dict(settings))
    try:
        result = container.attendance_service.finalize_day(work_date, processed_by=args.processed_by)
    finally:
        # Let the enqueued batch finish before the process exits.
        container.work_hour_queue.shutdown(wait=True)

    if result.batch_id:
        job = container.work_hour_queue.get_job(result.batch_id)
        print(f"{work_date}: {len(result.attendance_ids)} attendance(s), batch {job.batch_id} -> {job.status.value}")
        return 0 if job.status.value == "COMPLETED" else 1
    print(f"{work_date}: nothing to finalize")
    return 0


if __name__ == "__main__":
    sys.exit(main())
