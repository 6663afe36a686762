# tests/test_strategic_approvals_api.py

"""
Tests for the strategic approval endpoints.
"""

from fastapi.testclient import TestClient


PROPOSAL = {
    "title": "Open Lisbon office",
    "description": "Expand operations into Portugal",
    "category": "Strategic",
    "priority": "high",
}


def propose(client: TestClient, login, **overrides) -> dict:
    login("member@example.com")
    response = client.post("/strategic-approvals", json={**PROPOSAL, **overrides})
    assert response.status_code == 201
    return response.json()


def test_member_can_propose(client: TestClient, login):
    data = propose(client, login)

    assert data["status"] == "pending"
    assert data["requested_by"] == "user_member"
    assert data["priority"] == "high"


def test_priority_defaults_to_medium(client: TestClient, login):
    payload = {k: v for k, v in PROPOSAL.items() if k != "priority"}
    login("member@example.com")
    response = client.post("/strategic-approvals", json=payload)
    assert response.json()["priority"] == "medium"


def test_blank_title_rejected(client: TestClient, login):
    login("member@example.com")
    response = client.post("/strategic-approvals", json={**PROPOSAL, "title": " "})
    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_categories_are_public(client: TestClient):
    response = client.get("/strategic-approvals/categories")
    assert response.status_code == 200
    assert "Financial" in response.json()


def test_members_cannot_review(client: TestClient, login):
    approval = propose(client, login)

    assert client.get("/strategic-approvals").status_code == 403
    assert client.post(f"/strategic-approvals/{approval['id']}/approve").status_code == 403


def test_executive_reviews_then_approves(client: TestClient, login):
    approval = propose(client, login)
    login("exec@example.com")

    response = client.post(f"/strategic-approvals/{approval['id']}/review")
    assert response.status_code == 200
    assert response.json()["status"] == "under_review"

    response = client.post(
        f"/strategic-approvals/{approval['id']}/approve",
        json={"notes": "budget confirmed"},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    assert response.json()["notes"] == "budget confirmed"
    assert response.json()["reviewed_by"] == "user_exec"

    response = client.post(f"/strategic-approvals/{approval['id']}/reject")
    assert response.status_code == 409


def test_admin_rejects_directly_from_pending(client: TestClient, login):
    approval = propose(client, login)
    login("admin@example.com")

    response = client.post(f"/strategic-approvals/{approval['id']}/reject")

    assert response.status_code == 200
    assert response.json()["status"] == "rejected"


def test_list_and_filter(client: TestClient, login):
    propose(client, login, title="Budget", category="Financial")
    propose(client, login, title="New CRM", category="Technology")
    login("exec@example.com")

    everything = client.get("/strategic-approvals").json()
    assert len(everything) == 2

    financial = client.get("/strategic-approvals", params={"category": "Financial"}).json()
    assert [a["title"] for a in financial] == ["Budget"]

    assert client.get("/strategic-approvals/approval_missing").status_code == 404
