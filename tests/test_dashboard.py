from conftest import make_medication, make_seizure
from seizuretrack.core.dashboard import DashboardManager
from seizuretrack.models.entities import (
    AppointmentCreate,
    EmergencyContactCreate,
    SymptomJournalEntryCreate,
)


def test_overview_counts_and_trend(store, today):
    for day in ("2024-03-14", "2024-03-12", "2024-03-02", "2024-02-20", "2024-01-01"):
        store.seizures.add(make_seizure(day))
    store.medications.add(make_medication())

    overview = DashboardManager(store).get_overview(today)

    assert overview["seizuresLast7Days"] == 2
    assert overview["seizuresLast30Days"] == 4
    assert overview["trend"] == {"current": 2, "previous": 1, "delta": 1, "direction": "up"}
    assert overview["activeMedications"] == 1
    assert len(overview["recentSeizures"]) == 5
    assert overview["recentSeizures"][0]["date"] == "2024-01-01"


def test_overview_heat_map_covers_the_month(store, today):
    store.seizures.add(make_seizure("2024-03-14"))
    store.seizures.add(make_seizure("2024-03-14", time="20:00"))

    heat_map = DashboardManager(store).get_overview(today)["seizuresByDay"]

    assert len(heat_map) == 31
    assert heat_map["2024-03-14"] == 2
    assert heat_map["2024-03-01"] == 0


def test_overview_lists_three_upcoming_appointments(store, today):
    for day in ("2024-03-20", "2024-03-16", "2024-03-10", "2024-04-02", "2024-03-25"):
        store.appointments.add(
            AppointmentCreate(title="Visit", doctor="Dr. Lee", date=day, time="09:00")
        )

    overview = DashboardManager(store).get_overview(today)

    assert [a["date"] for a in overview["upcomingAppointments"]] == [
        "2024-03-16",
        "2024-03-20",
        "2024-03-25",
    ]


def test_medication_schedule_is_sorted_by_time(store, today):
    morning = store.medications.add(make_medication("A", times=["20:00", "08:00"]))
    store.medications.add(make_medication("B", times=["12:00"], pills_remaining=5))
    store.mark_medication_taken(morning.id, today.isoformat(), "08:00", True)

    schedule = DashboardManager(store).get_medication_schedule(today)

    assert [(d["name"], d["time"]) for d in schedule["doses"]] == [
        ("A", "08:00"),
        ("B", "12:00"),
        ("A", "20:00"),
    ]
    assert schedule["doses"][0]["taken"] is True
    assert schedule["takenCount"] == 1
    assert [m["name"] for m in schedule["lowStock"]] == ["B"]


def test_contacts_split_by_primary_flag(store):
    store.emergency_contacts.add(
        EmergencyContactCreate(name="Alex", relationship="Parent", phone="555-0100", is_primary=True)
    )
    store.emergency_contacts.add(
        EmergencyContactCreate(name="Sam", relationship="Friend", phone="555-0101")
    )

    contacts = DashboardManager(store).get_contacts()

    assert [c["name"] for c in contacts["primary"]] == ["Alex"]
    assert [c["name"] for c in contacts["others"]] == ["Sam"]
    assert "isPrimary" in contacts["primary"][0]


def test_journal_entry_for_date_returns_the_newest(store, today):
    levels = dict(mood=3, sleep_quality=3, sleep_hours=7, stress_level=2, energy_level=4)
    store.symptom_journal.add(SymptomJournalEntryCreate(date="2024-03-15", notes="first", **levels))
    store.symptom_journal.add(SymptomJournalEntryCreate(date="2024-03-15", notes="second", **levels))

    manager = DashboardManager(store)

    assert manager.get_journal_entry(today)["notes"] == "second"
    assert manager.get_journal_entry("2024-03-14") is None
