# tests/integration/test_health_endpoint.py

def test_health_ok(client):
    resp = client.get("/health")
    assert resp.status_code == 200

    data = resp.get_json()
    assert data["status"] == "healthy"
    assert data["service"] == "WhatsApp-Bitrix24 Backend"
    assert data["version"] == "2.0.0"
    assert data["timestamp"].endswith("Z")
