"""API tests for manually managed session integrations."""

import pytest


@pytest.fixture
def session_id(client, alice):
    response = client.post(
        "/api/sessions", json={"agentType": "research"}, headers=alice
    )
    return response.json()["sessionId"]


def test_create_integration_defaults_to_pending(client, alice, session_id):
    response = client.post(
        f"/api/sessions/{session_id}/integrations",
        json={"type": "calendar", "name": "Work calendar"},
        headers=alice,
    )

    assert response.status_code == 201
    integration = response.json()["integration"]
    assert integration["type"] == "calendar"
    assert integration["name"] == "Work calendar"
    assert integration["status"] == "pending"
    assert integration["sessionId"] == session_id


def test_status_may_move_in_any_direction(client, alice, session_id):
    integration_id = client.post(
        f"/api/sessions/{session_id}/integrations",
        json={"type": "github", "name": "GitHub", "status": "connected"},
        headers=alice,
    ).json()["integration"]["id"]
    url = f"/api/sessions/{session_id}/integrations/{integration_id}"

    failed = client.patch(url, json={"status": "failed"}, headers=alice)
    pending = client.patch(url, json={"status": "pending"}, headers=alice)

    assert failed.json()["integration"]["status"] == "failed"
    assert pending.json()["integration"]["status"] == "pending"


def test_patch_updates_config(client, alice, session_id):
    integration_id = client.post(
        f"/api/sessions/{session_id}/integrations",
        json={"type": "email", "name": "Inbox"},
        headers=alice,
    ).json()["integration"]["id"]

    response = client.patch(
        f"/api/sessions/{session_id}/integrations/{integration_id}",
        json={"config": {"folder": "INBOX"}},
        headers=alice,
    )

    assert response.status_code == 200
    assert response.json()["integration"]["config"] == {"folder": "INBOX"}


def test_delete_integration(client, alice, session_id):
    integration_id = client.post(
        f"/api/sessions/{session_id}/integrations",
        json={"type": "api", "name": "Weather API"},
        headers=alice,
    ).json()["integration"]["id"]

    response = client.delete(
        f"/api/sessions/{session_id}/integrations/{integration_id}", headers=alice
    )

    assert response.status_code == 200
    assert response.json() == {"success": True}
    listing = client.get(f"/api/sessions/{session_id}/integrations", headers=alice)
    assert listing.json()["integrations"] == []


def test_unknown_integration_is_not_found(client, alice, session_id):
    response = client.patch(
        f"/api/sessions/{session_id}/integrations/missing",
        json={"status": "connected"},
        headers=alice,
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Integration not found"


def test_invalid_type_is_rejected(client, alice, session_id):
    response = client.post(
        f"/api/sessions/{session_id}/integrations",
        json={"type": "carrier-pigeon", "name": "Coo"},
        headers=alice,
    )
    assert response.status_code == 422


def test_foreign_session_integrations_are_hidden(client, alice, bob, session_id):
    client.post(
        f"/api/sessions/{session_id}/integrations",
        json={"type": "github", "name": "GitHub"},
        headers=alice,
    )

    listing = client.get(f"/api/sessions/{session_id}/integrations", headers=bob)
    create = client.post(
        f"/api/sessions/{session_id}/integrations",
        json={"type": "github", "name": "Mine"},
        headers=bob,
    )

    assert listing.status_code == 404
    assert create.status_code == 404
