"""
Run one scheduled payroll/discipline job outside the API (for cron).

Usage:
  python scripts/run_job.py process-daily-attendance [--date 2026-10-19]
  python scripts/run_job.py recalculate-deductions
  python scripts/run_job.py reset-monthly-salary
  python scripts/run_job.py check-suspension-expiry
"""
import argparse
import logging
import sys
from datetime import date

from sqlalchemy.orm import Session
from staffdesk.core.logging import setup_logging
from staffdesk.db import session as db_session
from staffdesk.services import attendance_service, payroll_service, suspension_service

logger = logging.getLogger("staffdesk.jobs")

JOBS = (
    "process-daily-attendance",
    "recalculate-deductions",
    "reset-monthly-salary",
    "check-suspension-expiry",
)


def run(db: Session, job: str, target_date: date = None):
    if job == "process-daily-attendance":
        return attendance_service.process_daily_attendance(db, target_date)
    if job == "recalculate-deductions":
        return payroll_service.recalculate_deductions(db)
    if job == "reset-monthly-salary":
        return payroll_service.reset_monthly_salary(db)
    return {"completed": suspension_service.complete_expired_suspensions(db)}


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a scheduled staffdesk job")
    parser.add_argument("job", choices=JOBS)
    parser.add_argument("--date", type=date.fromisoformat, default=None, help="Day for process-daily-attendance (YYYY-MM-DD)")
    args = parser.parse_args()

    setup_logging()
    db: Session = db_session.SessionLocal()
    try:
        result = run(db, args.job, args.date)
        logger.info("%s finished: %s", args.job, result)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
