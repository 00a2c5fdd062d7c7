# tests/integration/test_send_endpoint.py
"""
Testes de integração para o endpoint /send.
"""

import json

import pytest

from relay.models import list_messages
from relay.models.storage import messages
from tests.factories import FakeResponse, count_rows, make_tenant


def test_send_text_success(client, engine, send_http):
    make_tenant(engine, "t-1", phone_number="918000000001")
    send_http.queue(FakeResponse(202, {"status": "submitted", "messageId": "gs-1"}))

    resp = client.post("/send", json={"tenant_id": "t-1", "to_number": "+91 783-481-1114", "message": "Olá!"})

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["success"] is True
    assert data["message"] == "Message sent successfully"
    assert data["gupshup_response"] == {"status": "submitted", "messageId": "gs-1"}

    form = send_http.calls[0]["data"]
    assert form["source"] == "918000000001"
    assert form["destination"] == "917834811114"
    assert json.loads(form["message"]) == {"type": "text", "text": "Olá!"}

    rows = list_messages(engine, "t-1")
    assert len(rows) == 1
    row = rows[0]
    assert row["direction"] == "outbound"
    assert row["status"] == "sent"
    assert row["gupshup_message_id"] == "gs-1"
    assert row["from_number"] == "918000000001"
    assert row["to_number"] == "917834811114"
    assert row["content"] == "Olá!"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"tenant_id": "t-1", "to_number": "917834811114"},
        {"tenant_id": "t-1", "message": "oi"},
        {"to_number": "917834811114", "message": "oi"},
    ],
)
def test_send_missing_fields(client, payload):
    resp = client.post("/send", json=payload)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Missing required fields"


def test_send_tenant_without_phone_is_not_configured(client, engine, send_http):
    make_tenant(engine, "t-1", phone_number=None)
    resp = client.post("/send", json={"tenant_id": "t-1", "to_number": "917834811114", "message": "oi"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "WhatsApp not configured for this tenant"
    assert send_http.calls == []


def test_send_unknown_tenant_is_not_configured(client):
    resp = client.post("/send", json={"tenant_id": "nope", "to_number": "917834811114", "message": "oi"})
    assert resp.status_code == 400


def test_send_invalid_number(client, engine, send_http):
    make_tenant(engine, "t-1")
    resp = client.post("/send", json={"tenant_id": "t-1", "to_number": "123", "message": "oi"})
    assert resp.status_code == 400
    assert "Invalid phone number format" in resp.get_json()["error"]
    assert send_http.calls == []


def test_send_not_submitted_returns_500_and_writes_nothing(client, engine, send_http):
    make_tenant(engine, "t-1")
    send_http.queue(FakeResponse(200, {"status": "error", "message": "Invalid app details"}))

    resp = client.post("/send", json={"tenant_id": "t-1", "to_number": "917834811114", "message": "oi"})

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Invalid app details"
    assert count_rows(engine, messages) == 0


def test_send_non_object_body_returns_json_400(client):
    resp = client.post("/send", json=["x"])
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Missing required fields"


@pytest.mark.parametrize(
    "payload",
    [
        {"tenant_id": "t-1", "to_number": "917834811114", "message": {"text": "oi"}},
        {"tenant_id": "t-1", "to_number": "917834811114", "message": ["oi"]},
        {"tenant_id": "t-1", "to_number": 917834811114, "message": "oi"},
    ],
)
def test_send_non_string_fields_rejected_before_provider_call(client, engine, send_http, payload):
    make_tenant(engine, "t-1")
    resp = client.post("/send", json=payload)
    assert resp.status_code == 400
    assert send_http.calls == []
    assert count_rows(engine, messages) == 0
