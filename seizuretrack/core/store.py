"""
Record store

Keeps the six health record collections in memory and writes a collection
back to the key-value medium, in full, every time it changes. Each collection
loads independently: a missing entry is an empty collection and an unreadable
one is reported as a warning without blocking the others.
"""

import json
import uuid
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from pydantic import BaseModel as PydanticBaseModel

from seizuretrack.core.db import StorageError
from seizuretrack.core.logger import get_logger
from seizuretrack.core.protocols import KeyValueStorage
from seizuretrack.models.entities import (
    Appointment,
    AppointmentUpdate,
    EmergencyContact,
    EmergencyContactUpdate,
    Medication,
    MedicationReminder,
    MedicationReminderCreate,
    MedicationReminderUpdate,
    MedicationUpdate,
    SeizureLog,
    SeizureLogUpdate,
    SymptomJournalEntry,
    SymptomJournalEntryUpdate,
)

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=PydanticBaseModel)
Payload = Union[PydanticBaseModel, Mapping[str, Any]]

STORAGE_KEYS: Dict[str, str] = {
    "seizures": "health_seizures",
    "medications": "health_medications",
    "appointments": "health_appointments",
    "emergency_contacts": "health_emergency_contacts",
    "symptom_journal": "health_symptom_journal",
    "reminders": "health_reminders",
}


def serialize_records(records: Iterable[PydanticBaseModel]) -> str:
    """Serialize records to a JSON array of camelCase objects"""
    return json.dumps(
        [record.model_dump(mode="json", by_alias=True, exclude_none=True) for record in records],
        ensure_ascii=False,
    )


def deserialize_records(model: Type[RecordT], raw: str) -> List[RecordT]:
    """Parse a JSON array produced by serialize_records

    Raises ValueError (including pydantic ValidationError) on malformed data.
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")
    return [model.model_validate(item) for item in data]


def _new_id() -> str:
    return str(uuid.uuid4())


def dose_key(reminder: MedicationReminder) -> Tuple[str, str, str]:
    """A medication has at most one dose record per date and time"""
    return reminder.medication_id, reminder.date, reminder.time


class DuplicateRecordError(ValueError):
    """A record would share its unique key with another record"""


class RecordCollection(Generic[RecordT]):
    """One persisted collection of records"""

    def __init__(
        self,
        name: str,
        storage_key: str,
        model: Type[RecordT],
        update_model: Type[PydanticBaseModel],
        *,
        prepend: bool,
        on_change: Callable[["RecordCollection[Any]"], None],
        on_delete: Optional[Callable[[RecordT], None]] = None,
        unique_key: Optional[Callable[[RecordT], Any]] = None,
    ):
        self.name = name
        self.storage_key = storage_key
        self.model = model
        self.update_model = update_model
        self.prepend = prepend
        self._on_change = on_change
        self._on_delete = on_delete
        self._unique_key = unique_key
        self._records: List[RecordT] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(tuple(self._records))

    @property
    def items(self) -> Tuple[RecordT, ...]:
        """Read-only snapshot of the collection"""
        return tuple(self._records)

    def get(self, record_id: str) -> Optional[RecordT]:
        index = self._index_of(record_id)
        return self._records[index] if index is not None else None

    def _index_of(self, record_id: str) -> Optional[int]:
        for index, record in enumerate(self._records):
            if getattr(record, "id") == record_id:
                return index
        return None

    def _check_unique(self, record: RecordT, ignore_index: Optional[int] = None) -> None:
        if self._unique_key is None:
            return
        key = self._unique_key(record)
        for index, other in enumerate(self._records):
            if index != ignore_index and self._unique_key(other) == key:
                raise DuplicateRecordError(
                    f"{self.name} record {getattr(other, 'id')} already has key {key}"
                )

    def add(self, payload: Payload) -> RecordT:
        """Assign a fresh id, insert and persist"""
        if isinstance(payload, PydanticBaseModel):
            data = payload.model_dump(by_alias=False)
        else:
            data = dict(payload)

        record_id = _new_id()
        while self._index_of(record_id) is not None:
            record_id = _new_id()
        data["id"] = record_id

        record = self.model.model_validate(data)
        self._check_unique(record)
        if self.prepend:
            self._records.insert(0, record)
        else:
            self._records.append(record)

        logger.debug(f"Added {self.name} record {record_id}")
        self._on_change(self)
        return record

    def update(self, record_id: str, changes: Payload) -> Optional[RecordT]:
        """Shallow-merge the provided fields into a record

        Unknown ids and empty change sets are no-ops. The id itself never
        changes; an "id" among the changes is ignored.
        """
        index = self._index_of(record_id)
        if index is None:
            logger.debug(f"Update skipped, {self.name} record not found: {record_id}")
            return None

        if not isinstance(changes, self.update_model):
            if isinstance(changes, PydanticBaseModel):
                changes = changes.model_dump(by_alias=False, exclude_unset=True)
            changes = self.update_model.model_validate(
                {k: v for k, v in changes.items() if k != "id"}
            )
        fields = changes.model_dump(by_alias=False, exclude_unset=True)

        current = self._records[index]
        if not fields:
            return current

        merged = self.model.model_validate(
            {**current.model_dump(by_alias=False), **fields, "id": record_id}
        )
        self._check_unique(merged, ignore_index=index)
        self._records[index] = merged

        logger.debug(f"Updated {self.name} record {record_id}: {sorted(fields)}")
        self._on_change(self)
        return merged

    def delete(self, record_id: str) -> bool:
        """Remove a record, unknown ids are a no-op"""
        index = self._index_of(record_id)
        if index is None:
            logger.debug(f"Delete skipped, {self.name} record not found: {record_id}")
            return False

        record = self._records.pop(index)
        logger.debug(f"Deleted {self.name} record {record_id}")
        self._on_change(self)
        if self._on_delete is not None:
            self._on_delete(record)
        return True

    def delete_where(self, predicate: Callable[[RecordT], bool]) -> int:
        """Remove every matching record with a single write"""
        kept = [record for record in self._records if not predicate(record)]
        removed = len(self._records) - len(kept)
        if removed:
            self._records = kept
            logger.debug(f"Deleted {removed} {self.name} record(s)")
            self._on_change(self)
        return removed

    def replace_all(self, records: Iterable[RecordT]) -> None:
        """Swap the in-memory contents without persisting (used when loading)"""
        self._records = list(records)


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of every collection at one point in time"""

    seizures: Tuple[SeizureLog, ...] = ()
    medications: Tuple[Medication, ...] = ()
    appointments: Tuple[Appointment, ...] = ()
    emergency_contacts: Tuple[EmergencyContact, ...] = ()
    symptom_journal: Tuple[SymptomJournalEntry, ...] = ()
    reminders: Tuple[MedicationReminder, ...] = ()


class RecordStore:
    """In-process owner of all health records

    Created once at startup and handed to every consumer; there is no
    module-level instance.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        cascade_medication_reminders: bool = True,
    ):
        self.storage = storage
        self.cascade_medication_reminders = cascade_medication_reminders
        self.is_loaded = False
        self._warnings: List[str] = []

        self.seizures: RecordCollection[SeizureLog] = RecordCollection(
            "seizures",
            STORAGE_KEYS["seizures"],
            SeizureLog,
            SeizureLogUpdate,
            prepend=True,
            on_change=self._persist,
        )
        self.medications: RecordCollection[Medication] = RecordCollection(
            "medications",
            STORAGE_KEYS["medications"],
            Medication,
            MedicationUpdate,
            prepend=False,
            on_change=self._persist,
            on_delete=self._on_medication_deleted,
        )
        self.appointments: RecordCollection[Appointment] = RecordCollection(
            "appointments",
            STORAGE_KEYS["appointments"],
            Appointment,
            AppointmentUpdate,
            prepend=False,
            on_change=self._persist,
        )
        self.emergency_contacts: RecordCollection[EmergencyContact] = RecordCollection(
            "emergency_contacts",
            STORAGE_KEYS["emergency_contacts"],
            EmergencyContact,
            EmergencyContactUpdate,
            prepend=False,
            on_change=self._persist,
        )
        self.symptom_journal: RecordCollection[SymptomJournalEntry] = RecordCollection(
            "symptom_journal",
            STORAGE_KEYS["symptom_journal"],
            SymptomJournalEntry,
            SymptomJournalEntryUpdate,
            prepend=True,
            on_change=self._persist,
        )
        self.reminders: RecordCollection[MedicationReminder] = RecordCollection(
            "reminders",
            STORAGE_KEYS["reminders"],
            MedicationReminder,
            MedicationReminderUpdate,
            prepend=False,
            on_change=self._persist,
            unique_key=dose_key,
        )

    @property
    def collections(self) -> Dict[str, RecordCollection[Any]]:
        return {
            "seizures": self.seizures,
            "medications": self.medications,
            "appointments": self.appointments,
            "emergency_contacts": self.emergency_contacts,
            "symptom_journal": self.symptom_journal,
            "reminders": self.reminders,
        }

    def collection(self, name: str) -> RecordCollection[Any]:
        try:
            return self.collections[name]
        except KeyError:
            raise KeyError(f"Unknown collection: {name}") from None

    def load(self) -> Dict[str, int]:
        """Load every collection from storage

        Returns the number of records loaded per collection.
        """
        counts: Dict[str, int] = {}
        for name, collection in self.collections.items():
            collection.replace_all(self._load_collection(collection))
            counts[name] = len(collection)

        self.is_loaded = True
        logger.info(f"Record store loaded: {counts}")
        return counts

    def _load_collection(self, collection: RecordCollection[Any]) -> List[Any]:
        try:
            raw = self.storage.get_item(collection.storage_key)
        except StorageError as e:
            self._warn(f"Could not read {collection.name}, starting empty: {e}")
            return []

        if raw is None:
            return []

        try:
            return deserialize_records(collection.model, raw)
        except (ValueError, TypeError) as e:
            self._warn(f"Stored {collection.name} data is malformed, starting empty: {e}")
            return []

    def _persist(self, collection: RecordCollection[Any]) -> None:
        try:
            self.storage.set_item(collection.storage_key, serialize_records(collection.items))
        except StorageError as e:
            self._warn(
                f"Could not save {collection.name}; changes are kept for this session only: {e}"
            )

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self._warnings.append(message)

    def pop_warnings(self) -> List[str]:
        """Return queued persistence warnings, each one only once"""
        warnings, self._warnings = self._warnings, []
        return warnings

    def _on_medication_deleted(self, medication: Medication) -> None:
        if not self.cascade_medication_reminders:
            return
        removed = self.reminders.delete_where(
            lambda reminder: reminder.medication_id == medication.id
        )
        if removed:
            logger.info(
                f"Removed {removed} reminder(s) of deleted medication {medication.id}"
            )

    def find_reminder(
        self, medication_id: str, date: str, time: str
    ) -> Optional[MedicationReminder]:
        for reminder in self.reminders:
            if (
                reminder.medication_id == medication_id
                and reminder.date == date
                and reminder.time == time
            ):
                return reminder
        return None

    def mark_medication_taken(
        self, medication_id: str, date: str, time: str, taken: bool
    ) -> MedicationReminder:
        """Upsert the dose record keyed on (medication_id, date, time)"""
        payload = MedicationReminderCreate(
            medication_id=medication_id, date=date, time=time, taken=taken
        )
        existing = self.find_reminder(payload.medication_id, payload.date, payload.time)
        if existing is None:
            return self.reminders.add(payload)

        updated = self.reminders.update(existing.id, {"taken": taken})
        return updated if updated is not None else existing

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            seizures=self.seizures.items,
            medications=self.medications.items,
            appointments=self.appointments.items,
            emergency_contacts=self.emergency_contacts.items,
            symptom_journal=self.symptom_journal.items,
            reminders=self.reminders.items,
        )
