import os
import tempfile

# Point the app home at a scratch directory before any seizuretrack import
# creates the default config, log files or database there.
os.environ["SEIZURETRACK_HOME"] = tempfile.mkdtemp(prefix="seizuretrack-tests-")

from datetime import date, datetime  # noqa: E402
from typing import Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402

from seizuretrack.core.db import DatabaseManager, StorageError  # noqa: E402
from seizuretrack.core.notifications import NotificationCenter  # noqa: E402
from seizuretrack.core.store import RecordStore  # noqa: E402
from seizuretrack.models.entities import (  # noqa: E402
    MedicationCreate,
    SeizureLogCreate,
)

TODAY = date(2024, 3, 15)


class MemoryStorage:
    """Dict-backed key-value medium"""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})
        self.writes: List[str] = []

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.writes.append(key)
        self.items[key] = value

    def remove_item(self, key: str) -> bool:
        return self.items.pop(key, None) is not None

    def keys(self) -> List[str]:
        return list(self.items)


class FailingStorage(MemoryStorage):
    """Reads work, every write raises"""

    def set_item(self, key: str, value: str) -> None:
        raise StorageError("disk full")


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(memory_storage) -> RecordStore:
    record_store = RecordStore(memory_storage)
    record_store.load()
    return record_store


@pytest.fixture
def db(tmp_path) -> DatabaseManager:
    return DatabaseManager(str(tmp_path / "seizuretrack.db"))


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter(history_size=10)


def make_seizure(
    day: str,
    *,
    time: str = "08:00",
    type: str = "focal",
    duration: int = 60,
    severity: int = 3,
    triggers: Optional[List[str]] = None,
) -> SeizureLogCreate:
    return SeizureLogCreate(
        date=day,
        time=time,
        type=type,
        duration=duration,
        severity=severity,
        triggers=triggers,
    )


def make_medication(
    name: str = "Levetiracetam",
    *,
    times: Optional[List[str]] = None,
    reminder_enabled: bool = True,
    pills_remaining: Optional[int] = None,
) -> MedicationCreate:
    return MedicationCreate(
        name=name,
        dosage="500mg",
        frequency="Twice daily",
        times=times or ["08:00", "20:00"],
        reminder_enabled=reminder_enabled,
        pills_remaining=pills_remaining,
    )


def at(day: date, hhmm: str) -> datetime:
    hour, minute = hhmm.split(":")
    return datetime(day.year, day.month, day.day, int(hour), int(minute))
