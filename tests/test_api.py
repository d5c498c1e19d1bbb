import time

import pytest
from fastapi.testclient import TestClient

from design_studio.main import create_app
from design_studio.services.events import EventBus
from design_studio.services.mission_orchestrator import MissionOrchestrator
from payloads import mission_payload


@pytest.fixture()
def api_client(catalog):
    orchestrator = MissionOrchestrator(
        catalog,
        batch_delay=0.01,
        event_bus=EventBus(queue_size=100, history_limit=50),
        broadcast=EventBus(queue_size=100, history_limit=50),
    )
    with TestClient(create_app(orchestrator=orchestrator)) as client:
        yield client


def _wait_for_completed(client: TestClient, expected: int) -> dict:
    for _ in range(200):
        status = client.get("/missions/status").json()
        if status["missionsCompleted"] >= expected:
            return status
        time.sleep(0.01)
    return status


def test_health(api_client):
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_list_templates_filters_by_sector(api_client):
    everything = api_client.get("/templates").json()
    medical = api_client.get("/templates", params={"sector": "medical"}).json()

    assert len(everything) == 25
    assert medical
    assert {template["sector"] for template in medical} == {"medical"}
    assert "designType" in medical[0]


def test_list_templates_rejects_unknown_sector(api_client):
    assert api_client.get("/templates", params={"sector": "boulangerie"}).status_code == 422


def test_select_template(api_client):
    body = {"requirements": mission_payload()["requirements"], "businessInfo": mission_payload()["businessInfo"]}

    response = api_client.post("/templates/select", json=body)

    assert response.status_code == 200
    payload = response.json()
    assert payload["primaryTemplate"]["sector"] == "restaurant"
    assert 0 <= payload["matchScore"] <= 100
    assert len(payload["alternativeTemplates"]) <= 3


def test_urgent_mission_returns_result(api_client):
    response = api_client.post("/missions", json=mission_payload(priority="urgent", mission_id="api-urgent"))

    assert response.status_code == 200
    payload = response.json()
    assert payload["kind"] == "ready"
    assert payload["result"]["missionId"] == "api-urgent"
    assert payload["result"]["deliverables"]["previewUrl"]


def test_regular_mission_is_accepted_then_completed(api_client):
    response = api_client.post("/missions", json=mission_payload(mission_id="api-batched"))

    assert response.status_code == 202
    assert response.json() == {"kind": "accepted", "missionId": "api-batched", "status": "pending"}

    status = _wait_for_completed(api_client, 1)
    assert status["missionsCompleted"] == 1

    record = api_client.get("/missions/api-batched").json()
    assert record["mission"]["status"] == "completed"
    assert record["result"]["qualityScore"] > 0


def test_invalid_mission_returns_422(api_client):
    response = api_client.post("/missions", json={"requirements": mission_payload()["requirements"]})

    assert response.status_code == 422
    assert any("businessInfo" in error for error in response.json()["detail"])


def test_unknown_mission_returns_404(api_client):
    response = api_client.get("/missions/does-not-exist")

    assert response.status_code == 404
    assert response.json()["missionId"] == "does-not-exist"


def test_control_channel(api_client):
    api_client.post("/missions/control", json={"command": "pauseProcessing"})
    api_client.post("/missions", json=mission_payload(mission_id="api-held"))

    status = api_client.post("/missions/control", json={"command": "getStatus"}).json()
    unknown = api_client.post("/missions/control", json={"command": "selfDestruct"})

    assert status["isPaused"] is True
    assert status["missionsInQueue"] == 1
    assert unknown.status_code == 200
    assert unknown.json() == {"ok": True}

    api_client.post("/missions/control", json={"command": "resumeProcessing"})
    assert _wait_for_completed(api_client, 1)["missionsCompleted"] == 1


def test_recent_events_respect_limit(api_client):
    api_client.post("/missions", json=mission_payload(priority="urgent"))

    events = api_client.get("/missions/events", params={"limit": 2}).json()

    assert [event["type"] for event in events] == ["started", "completed"]
    assert api_client.get("/missions/events", params={"limit": 0}).status_code == 422
