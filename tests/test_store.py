import pytest
from pydantic import ValidationError

from conftest import make_medication, make_seizure
from seizuretrack.core.store import DuplicateRecordError, RecordStore
from seizuretrack.models.entities import (
    AppointmentCreate,
    EmergencyContactCreate,
    SymptomJournalEntryCreate,
)


def test_add_assigns_unique_ids_and_keeps_payload(store):
    first = store.seizures.add(make_seizure("2024-03-10", triggers=["Stress"]))
    second = store.seizures.add(make_seizure("2024-03-11"))

    assert first.id and second.id
    assert first.id != second.id
    assert store.seizures.get(first.id) == first
    assert first.date == "2024-03-10"
    assert first.type == "focal"
    assert first.triggers == ["Stress"]


def test_seizures_and_journal_are_newest_first(store):
    older = store.seizures.add(make_seizure("2024-03-01"))
    newer = store.seizures.add(make_seizure("2024-03-02"))
    assert [s.id for s in store.seizures] == [newer.id, older.id]

    entry = dict(mood=3, sleep_quality=3, sleep_hours=7, stress_level=2, energy_level=4)
    a = store.symptom_journal.add(SymptomJournalEntryCreate(date="2024-03-01", **entry))
    b = store.symptom_journal.add(SymptomJournalEntryCreate(date="2024-03-02", **entry))
    assert [e.id for e in store.symptom_journal] == [b.id, a.id]


def test_other_collections_keep_insertion_order(store):
    a = store.medications.add(make_medication("A"))
    b = store.medications.add(make_medication("B"))
    assert [m.id for m in store.medications] == [a.id, b.id]

    first = store.appointments.add(
        AppointmentCreate(title="Neurology", doctor="Dr. Lee", date="2024-04-01", time="10:00")
    )
    second = store.appointments.add(
        AppointmentCreate(title="EEG", doctor="Dr. Lee", date="2024-03-20", time="09:00")
    )
    assert [a.id for a in store.appointments] == [first.id, second.id]


def test_update_merges_only_provided_fields(store):
    seizure = store.seizures.add(make_seizure("2024-03-10", severity=2))

    updated = store.seizures.update(seizure.id, {"severity": 4})

    assert updated.severity == 4
    assert updated.date == "2024-03-10"
    assert updated.duration == seizure.duration
    assert store.seizures.get(seizure.id).severity == 4


def test_update_accepts_camel_case_keys(store):
    medication = store.medications.add(make_medication(reminder_enabled=False))

    updated = store.medications.update(medication.id, {"reminderEnabled": True})

    assert updated.reminder_enabled is True


def test_update_with_no_changes_is_a_no_op(store, memory_storage):
    seizure = store.seizures.add(make_seizure("2024-03-10"))
    writes = len(memory_storage.writes)

    assert store.seizures.update(seizure.id, {}) == seizure
    assert len(memory_storage.writes) == writes


def test_update_unknown_id_leaves_collection_unchanged(store, memory_storage):
    store.seizures.add(make_seizure("2024-03-10"))
    before = store.seizures.items
    writes = len(memory_storage.writes)

    assert store.seizures.update("missing", {"severity": 5}) is None
    assert store.seizures.items == before
    assert len(memory_storage.writes) == writes


def test_update_rejects_invalid_values(store):
    seizure = store.seizures.add(make_seizure("2024-03-10"))

    with pytest.raises(ValidationError):
        store.seizures.update(seizure.id, {"severity": 9})

    assert store.seizures.get(seizure.id).severity == seizure.severity


def test_update_ignores_id_in_changes(store):
    seizure = store.seizures.add(make_seizure("2024-03-10", severity=2))

    updated = store.seizures.update(seizure.id, {"id": "other", "severity": 4})

    assert updated.id == seizure.id
    assert updated.severity == 4
    assert store.seizures.get("other") is None


def test_delete_removes_record_and_is_idempotent(store):
    seizure = store.seizures.add(make_seizure("2024-03-10"))

    assert store.seizures.delete(seizure.id) is True
    assert store.seizures.get(seizure.id) is None
    assert store.seizures.delete(seizure.id) is False
    assert len(store.seizures) == 0


def test_mark_medication_taken_upserts_one_record(store):
    medication = store.medications.add(make_medication())

    store.mark_medication_taken(medication.id, "2024-03-15", "08:00", True)
    record = store.mark_medication_taken(medication.id, "2024-03-15", "08:00", False)

    matching = [r for r in store.reminders if r.medication_id == medication.id]
    assert len(matching) == 1
    assert matching[0].id == record.id
    assert matching[0].taken is False


def test_mark_medication_taken_keys_on_date_and_time(store):
    medication = store.medications.add(make_medication())

    store.mark_medication_taken(medication.id, "2024-03-15", "08:00", True)
    store.mark_medication_taken(medication.id, "2024-03-15", "20:00", True)
    store.mark_medication_taken(medication.id, "2024-03-16", "08:00", True)

    assert len(store.reminders) == 3


def test_dose_records_are_unique_per_medication_date_and_time(store, memory_storage):
    medication = store.medications.add(make_medication())
    morning = store.reminders.add(
        {"medication_id": medication.id, "date": "2024-03-15", "time": "08:00", "taken": True}
    )
    evening = store.reminders.add(
        {"medication_id": medication.id, "date": "2024-03-15", "time": "20:00"}
    )
    writes = len(memory_storage.writes)

    with pytest.raises(DuplicateRecordError):
        store.reminders.add({"medication_id": medication.id, "date": "2024-03-15", "time": "08:00"})
    with pytest.raises(DuplicateRecordError):
        store.reminders.update(evening.id, {"time": "08:00"})

    assert store.reminders.items == (morning, evening)
    assert len(memory_storage.writes) == writes

    # re-saving a record under its own key is fine
    assert store.reminders.update(morning.id, {"time": "08:00", "taken": False}).taken is False


def test_deleting_medication_cascades_to_its_reminders(store):
    kept = store.medications.add(make_medication("Kept"))
    removed = store.medications.add(make_medication("Removed"))
    store.mark_medication_taken(kept.id, "2024-03-15", "08:00", True)
    store.mark_medication_taken(removed.id, "2024-03-15", "08:00", True)

    store.medications.delete(removed.id)

    assert [r.medication_id for r in store.reminders] == [kept.id]


def test_cascade_can_be_disabled(memory_storage):
    store = RecordStore(memory_storage, cascade_medication_reminders=False)
    store.load()
    medication = store.medications.add(make_medication())
    store.mark_medication_taken(medication.id, "2024-03-15", "08:00", True)

    store.medications.delete(medication.id)

    assert len(store.reminders) == 1


def test_snapshot_is_not_affected_by_later_writes(store):
    store.seizures.add(make_seizure("2024-03-10"))
    snapshot = store.snapshot()

    store.seizures.add(make_seizure("2024-03-11"))

    assert len(snapshot.seizures) == 1
    assert len(store.seizures) == 2


def test_several_primary_contacts_are_allowed(store):
    for name in ("Alex", "Sam"):
        store.emergency_contacts.add(
            EmergencyContactCreate(name=name, relationship="Parent", phone="555-0100", is_primary=True)
        )

    assert all(c.is_primary for c in store.emergency_contacts)


def test_unknown_collection_name(store):
    with pytest.raises(KeyError):
        store.collection("notes")
