"""Standalone scheduler process applying weekly plan adjustments."""
from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from filelock import FileLock
from sqlalchemy import select

from runcoach.config import get_settings
from runcoach.database import SessionLocal, run_migrations, session_scope
from runcoach.logging_config import configure_logging
from runcoach.models.database_models import Goal
from runcoach.services.plan_adjuster import apply_weekly_adjustment


logger = logging.getLogger("scheduler")


def acquire_lock(lock_path: Path) -> FileLock:
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(str(lock_path))
    lock.acquire(timeout=0)
    return lock


def _active_athlete_ids() -> list[int]:
    with session_scope(SessionLocal) as db:
        return list(db.scalars(select(Goal.athlete_id).where(Goal.is_active.is_(True)).distinct()))


def _adjust_athlete(athlete_id: int, today: date) -> Dict[str, Any]:
    with session_scope(SessionLocal) as db:
        result = apply_weekly_adjustment(db, athlete_id, today)
    return {
        "applied": result.applied,
        "type": result.adjustment.type if result.adjustment else None,
    }


def perform_weekly_adjustments(today: date | None = None) -> Dict[int, Dict[str, Any]]:
    """
    Run the adjustment check for every athlete with an active goal.

    Each athlete gets its own transaction so one failure does not undo the
    others.

    Returns:
        dict: mapping athlete id -> {"applied": bool, "type": str | None} or {"error": str}
    """
    today = today or date.today()
    summary: Dict[int, Dict[str, Any]] = {}

    for athlete_id in _active_athlete_ids():
        try:
            summary[athlete_id] = _adjust_athlete(athlete_id, today)
        except Exception as e:
            logger.exception("Adjustment check failed for athlete %s", athlete_id)
            summary[athlete_id] = {"error": str(e)}
            continue

        logger.info(
            "Adjustment check | athlete=%s | applied=%s | type=%s",
            athlete_id,
            summary[athlete_id]["applied"],
            summary[athlete_id]["type"],
        )

    return summary


async def run_weekly_job() -> None:
    start = datetime.now(timezone.utc)
    logger.info("Weekly adjustment job started")

    try:
        summary = await asyncio.to_thread(perform_weekly_adjustments)
    except Exception:
        logger.exception("Weekly adjustment job failed")
        return

    applied = sum(1 for details in summary.values() if details.get("applied"))
    failed = sum(1 for details in summary.values() if "error" in details)
    elapsed = (datetime.now(timezone.utc) - start).total_seconds()
    logger.info(
        "Weekly adjustment job finished in %.2fs | athletes=%d | applied=%d | failed=%d",
        elapsed,
        len(summary),
        applied,
        failed,
    )


async def main(run_now: bool) -> None:
    configure_logging()
    settings = get_settings()
    run_migrations()

    lock_path = settings.scheduler_lock_file
    lock = acquire_lock(lock_path)
    logger.info("Acquired scheduler lock at %s", lock_path)
    try:
        if run_now:
            await run_weekly_job()
            return

        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            run_weekly_job,
            "cron",
            day_of_week=settings.scheduler_day_of_week,
            hour=settings.scheduler_hour,
            minute=settings.scheduler_minute,
        )
        scheduler.start()

        logger.info(
            "Scheduler running (cron %s %02d:%02d). Press Ctrl+C to exit.",
            settings.scheduler_day_of_week,
            settings.scheduler_hour,
            settings.scheduler_minute,
        )
        await asyncio.Event().wait()
    finally:
        lock.release()
        logger.info("Released scheduler lock at %s", lock_path)
        if lock_path.exists():
            lock_path.unlink()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run weekly adjustment scheduler")
    parser.add_argument("--run-now", action="store_true", help="Execute job immediately and exit")
    args = parser.parse_args()

    try:
        asyncio.run(main(run_now=args.run_now))
    except TimeoutError:
        logger.warning("Scheduler already running; exiting.")
