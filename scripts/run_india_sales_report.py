#!/usr/bin/env python3
"""
Run the India sales report synchronously, without the Celery worker.

Usage:
    python scripts/run_india_sales_report.py                  # previous month
    python scripts/run_india_sales_report.py --month 6 --year 2023
Exit codes:
    0 success, 1 report failed, 2 invalid period.
"""
import argparse
import logging
import sys

from taxrecon.core.exceptions import InvalidPeriodError
from taxrecon.core.logger import init_logging
from taxrecon.db.session import session_scope
from taxrecon.services.sales_report.factory import build_india_sales_report_job

logger = logging.getLogger("run_india_sales_report")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate the India sales tax report")
    parser.add_argument("--month", type=int, help="Month (1-12), defaults to last month")
    parser.add_argument("--year", type=int, help="Year (2014-3200), defaults to last month's year")
    args = parser.parse_args(argv)

    init_logging()
    try:
        with session_scope() as db:
            result = build_india_sales_report_job(db).run(args.month, args.year)
    except InvalidPeriodError as exc:
        print(f"❌ {exc.message}", file=sys.stderr)
        return 2
    except Exception as exc:  # noqa: BLE001
        logger.exception("Report run failed")
        print(f"❌ Report failed: {exc}", file=sys.stderr)
        return 1

    print(f"✅ {result.period.label}: {result.row_count} rows")
    print(f"   Key: {result.artifact.key}")
    print(f"   URL: {result.url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
