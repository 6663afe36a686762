# tests/test_health.py

from fastapi.testclient import TestClient
from unittest.mock import MagicMock, patch


def test_app_health(client: TestClient):
    response = client.get("/health/app")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_db_health_not_configured(client: TestClient):
    with patch("core.supabase_client.get_supabase_client", return_value=None):
        response = client.get("/health/db")

    assert response.status_code == 200
    assert response.json()["status"] == "not_configured"


def test_db_health_degraded_when_a_table_fails(client: TestClient):
    mock_client = MagicMock()
    good = MagicMock()
    good.select.return_value.limit.return_value.execute.return_value = MagicMock(data=[{"id": "x"}])
    bad = MagicMock()
    bad.select.return_value.limit.return_value.execute.side_effect = Exception("relation missing")
    mock_client.table.side_effect = lambda name: bad if name == "strategic_approvals" else good

    with patch("core.supabase_client.get_supabase_client", return_value=mock_client):
        data = client.get("/health/db").json()

    assert data["status"] == "degraded"
    assert data["details"]["tables"]["users"]["rows_found"] == 1
    assert data["details"]["tables"]["strategic_approvals"]["status"] == "error"
