import pytest
import toml
from fastapi.testclient import TestClient

from seizuretrack.app import create_app
from seizuretrack.handlers import get_registered_handlers
from seizuretrack.models.entities import SeizureLogCreate


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        toml.dumps(
            {
                "database": {"path": str(tmp_path / "api.db")},
                "logging": {"level": "WARNING", "logs_dir": str(tmp_path / "logs")},
                "reminders": {"check_interval": 60},
                "reports": {"default_range": "30d", "output_dir": str(tmp_path / "reports")},
            }
        ),
        encoding="utf-8",
    )
    return str(path)


@pytest.fixture
def client(config_file):
    with TestClient(create_app(config_file)) as test_client:
        yield test_client


SEIZURE = {
    "date": "2024-03-14",
    "time": "08:30",
    "type": "tonic-clonic",
    "duration": 90,
    "severity": 4,
    "triggers": ["Stress", " ", "Stress", "Lack of sleep"],
}

MEDICATION = {
    "name": "Levetiracetam",
    "dosage": "500mg",
    "frequency": "Twice daily",
    "times": ["08:00", "", "20:00"],
    "pillsRemaining": 30,
}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_seizure_crud(client):
    created = client.post("/api/seizures", json=SEIZURE).json()
    assert created["success"] is True
    seizure = created["data"]
    assert seizure["id"]
    assert seizure["triggers"] == ["Stress", "Lack of sleep"]

    updated = client.post(
        "/api/seizures/update", json={"id": seizure["id"], "changes": {"severity": 2}}
    ).json()
    assert updated["data"]["severity"] == 2
    assert updated["data"]["duration"] == 90

    listed = client.get("/api/seizures").json()
    assert [s["id"] for s in listed["data"]] == [seizure["id"]]

    deleted = client.post("/api/seizures/delete", json={"id": seizure["id"]}).json()
    assert deleted["success"] is True
    assert client.get("/api/seizures").json()["data"] == []


def test_seizure_search(client):
    client.post("/api/seizures", json=SEIZURE)
    client.post("/api/seizures", json={**SEIZURE, "type": "absence", "triggers": [], "notes": "During class"})

    assert len(client.get("/api/seizures").json()["data"]) == 2
    by_trigger = client.get("/api/seizures", params={"q": "lack of"}).json()["data"]
    by_notes = client.get("/api/seizures", params={"q": "class"}).json()["data"]
    assert [s["type"] for s in by_trigger] == ["tonic-clonic"]
    assert [s["type"] for s in by_notes] == ["absence"]


def test_invalid_payload_is_rejected(client):
    response = client.post("/api/seizures", json={**SEIZURE, "severity": 7})

    assert response.status_code == 422
    assert client.get("/api/seizures").json()["data"] == []


def test_unknown_id_reports_not_found(client):
    body = client.post("/api/seizures/update", json={"id": "nope", "changes": {"severity": 2}}).json()

    assert body["success"] is False
    assert "not found" in body["message"]


def test_mark_medication_taken_and_schedule(client):
    medication = client.post("/api/medications", json=MEDICATION).json()["data"]
    assert medication["times"] == ["08:00", "20:00"]

    for taken in (True, False, True):
        response = client.post(
            "/api/medications/mark-taken",
            json={"medicationId": medication["id"], "date": "2024-03-15", "time": "08:00", "taken": taken},
        )
        assert response.json()["success"] is True

    doses = client.get("/api/medications/doses").json()["data"]
    assert len(doses) == 1
    assert doses[0]["taken"] is True

    schedule = client.get("/api/dashboard/medication-schedule", params={"date": "2024-03-15"}).json()
    assert [d["taken"] for d in schedule["data"]["doses"]] == [True, False]

    client.post("/api/medications/delete", json={"id": medication["id"]})
    assert client.get("/api/medications/doses").json()["data"] == []


def test_dashboard_overview(client):
    client.post("/api/seizures", json=SEIZURE)

    overview = client.get("/api/dashboard/overview", params={"date": "2024-03-15"}).json()

    assert overview["success"] is True
    assert overview["data"]["seizuresLast7Days"] == 1
    assert overview["data"]["trend"]["direction"] == "up"


def test_dashboard_rejects_bad_date(client):
    body = client.get("/api/dashboard/overview", params={"date": "15/03/2024"}).json()

    assert body["success"] is False


def test_journal_and_contacts(client):
    entry = {
        "date": "2024-03-15",
        "mood": 4,
        "sleepQuality": 3,
        "sleepHours": 6.5,
        "stressLevel": 2,
        "energyLevel": 3,
        "alcoholConsumed": True,
    }
    assert client.post("/api/journal", json=entry).json()["success"] is True
    found = client.get("/api/dashboard/journal-entry", params={"date": "2024-03-15"}).json()
    assert found["data"]["alcoholConsumed"] is True

    contact = {"name": "Alex", "relationship": "Parent", "phone": "555-0100", "isPrimary": True}
    assert client.post("/api/contacts", json=contact).json()["success"] is True
    contacts = client.get("/api/dashboard/contacts").json()["data"]
    assert [c["name"] for c in contacts["primary"]] == ["Alex"]


def test_report_summary_and_export(client):
    client.post("/api/seizures", json=SEIZURE)

    summary = client.get("/api/reports/summary", params={"range": "7d", "date": "2024-03-15"}).json()
    assert summary["data"]["total"] == 1
    assert summary["data"]["averageDuration"] == 90

    export = client.get("/api/reports/export", params={"range": "7d", "date": "2024-03-15"})
    assert export.status_code == 200
    assert "seizure-report-2024-03-15.txt" in export.headers["content-disposition"]
    assert "Tonic-Clonic (90s, severity 4/5)" in export.text


def test_report_rejects_unknown_range(client):
    body = client.get("/api/reports/summary", params={"range": "2w"}).json()

    assert body["success"] is False


def test_notification_permission_arms_scheduler(client):
    body = client.post("/api/reminders/permission", json={"status": "granted"}).json()
    assert body["data"]["state"] == "armed"

    body = client.post("/api/reminders/permission", json={"status": "denied"}).json()
    assert body["data"]["state"] == "idle"
    assert body["data"]["permission"] == "denied"


def test_reference_lists(client):
    data = client.get("/api/reference").json()["data"]

    assert "tonic-clonic" in [t["value"] for t in data["seizureTypes"]]
    assert "Stress" in data["commonTriggers"]


def test_records_survive_restart(config_file):
    with TestClient(create_app(config_file)) as first:
        first.post("/api/seizures", json=SEIZURE)

    with TestClient(create_app(config_file)) as second:
        assert len(second.get("/api/seizures").json()["data"]) == 1


def test_system_stats(client):
    client.post("/api/seizures", json=SEIZURE)

    stats = client.get("/api/system/stats").json()["data"]

    assert stats["records"]["seizures"] == 1
    assert stats["reminders"]["state"] == "idle"


def test_registered_handlers_back_the_routes(client):
    handlers = get_registered_handlers()

    assert handlers["list_seizures"]["method"] == "GET"
    assert handlers["list_seizures"]["path"] == "/seizures"
    assert handlers["add_seizure"]["body"] is SeizureLogCreate

    paths = {(route.path, method) for route in client.app.routes for method in getattr(route, "methods", ())}
    for info in handlers.values():
        assert (f"/api{info['path']}", info["method"]) in paths

    handlers.pop("list_seizures")
    assert "list_seizures" in get_registered_handlers()
