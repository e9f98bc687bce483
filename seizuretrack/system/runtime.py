"""Backend runtime control utility

Builds the runtime context (database, record store, notifications, reminder
scheduler) once at startup and tears it down at exit. Shared by the CLI and
the FastAPI lifespan.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from seizuretrack.config.loader import ConfigLoader, get_config
from seizuretrack.core.analytics import WEEKDAYS, parse_weekday
from seizuretrack.core.dashboard import DashboardManager
from seizuretrack.core.db import DatabaseManager, open_database
from seizuretrack.core.logger import get_logger, setup_logging
from seizuretrack.core.notifications import NotificationCenter
from seizuretrack.core.reminders import ReminderScheduler
from seizuretrack.core.store import RecordStore

logger = get_logger(__name__)


@dataclass
class Runtime:
    """Everything a request handler or CLI command needs"""

    config: ConfigLoader
    db: DatabaseManager
    store: RecordStore
    notifications: NotificationCenter
    scheduler: ReminderScheduler
    dashboard: DashboardManager
    week_starts_on: int = WEEKDAYS["sunday"]
    started_at: datetime = field(default_factory=datetime.now)


def build_runtime(config_file: Optional[str] = None) -> Runtime:
    """Load configuration, open the database and load the record store"""
    config_loader = get_config(config_file)
    if config_file is not None:
        # Re-apply logging settings from the explicit configuration file
        setup_logging(config_loader)
    logger.info(f"✓ Configuration file: {config_loader.config_file}")

    db = open_database(config_loader.get("database.path") or None)

    store = RecordStore(
        db,
        cascade_medication_reminders=bool(
            config_loader.get("store.cascade_medication_reminders", True)
        ),
    )
    store.load()

    notifications = NotificationCenter(
        history_size=int(config_loader.get("reminders.notification_history", 50))
    )
    scheduler = ReminderScheduler(
        store,
        notifications,
        check_interval=float(config_loader.get("reminders.check_interval", 60)),
    )

    try:
        week_starts_on = parse_weekday(config_loader.get("reports.week_starts_on", "sunday"))
    except ValueError as e:
        logger.warning(f"Invalid reports.week_starts_on, using sunday: {e}")
        week_starts_on = WEEKDAYS["sunday"]

    runtime = Runtime(
        config=config_loader,
        db=db,
        store=store,
        notifications=notifications,
        scheduler=scheduler,
        dashboard=DashboardManager(store),
        week_starts_on=week_starts_on,
    )
    logger.info("✓ Runtime initialized")
    return runtime


async def start_runtime(
    config_file: Optional[str] = None, *, grant_notifications: bool = False
) -> Runtime:
    """Build the runtime; optionally arm reminders right away (terminal mode)"""
    runtime = build_runtime(config_file)
    if grant_notifications:
        await runtime.scheduler.update_permission("granted")
    return runtime


async def stop_runtime(runtime: Runtime, *, quiet: bool = False) -> None:
    """Cancel the reminder scheduler

    Args:
        quiet: When True, only log debug messages, avoid shutdown prompts in terminal.
    """
    log = logger.debug if quiet else logger.info
    log("Stopping runtime...")

    try:
        # Stop within 5 seconds at most
        await asyncio.wait_for(runtime.scheduler.stop(quiet=quiet), timeout=5.0)
    except asyncio.TimeoutError:
        logger.warning("Stopping reminder scheduler timed out")
    except Exception as e:
        logger.error(f"Failed to stop reminder scheduler: {e}", exc_info=True)

    for warning in runtime.store.pop_warnings():
        logger.warning(f"Unreported storage warning at shutdown: {warning}")

    log("Runtime stopped")


def get_runtime_stats(runtime: Runtime) -> Dict[str, Any]:
    """Record counts, storage usage and scheduler status"""
    return {
        "startedAt": runtime.started_at.isoformat(),
        "databasePath": runtime.db.db_path,
        "records": {name: len(c) for name, c in runtime.store.collections.items()},
        "storage": runtime.db.get_storage_stats(),
        "reminders": runtime.scheduler.get_status(),
    }
