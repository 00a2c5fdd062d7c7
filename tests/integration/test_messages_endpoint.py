# tests/integration/test_messages_endpoint.py
from relay.models import insert_message
from tests.factories import make_tenant


def _store(engine, tenant_id, msg_id, created_at, to_number="917834811114"):
    insert_message(
        engine,
        id=msg_id,
        tenant_id=tenant_id,
        gupshup_message_id=f"gs-{msg_id}",
        direction="outbound",
        from_number="918000000001",
        to_number=to_number,
        message_type="text",
        content=msg_id,
        status="sent",
        created_at=created_at,
    )


def test_messages_requires_tenant_id(client):
    resp = client.get("/messages")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Missing tenant_id"


def test_messages_only_for_tenant_oldest_first(client, engine):
    make_tenant(engine, "t-1")
    make_tenant(engine, "t-2")
    _store(engine, "t-1", "second", "2026-03-01T12:00:05.000Z")
    _store(engine, "t-1", "first", "2026-03-01T12:00:01.000Z")
    _store(engine, "t-2", "other", "2026-03-01T12:00:00.000Z")

    resp = client.get("/messages", query_string={"tenant_id": "t-1"})

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["success"] is True
    assert [m["content"] for m in data["messages"]] == ["first", "second"]
    created = [m["created_at"] for m in data["messages"]]
    assert created == sorted(created)


def test_messages_filter_by_to_number(client, engine):
    make_tenant(engine, "t-1")
    _store(engine, "t-1", "a", "2026-03-01T12:00:01.000Z", to_number="917834811114")
    _store(engine, "t-1", "b", "2026-03-01T12:00:02.000Z", to_number="919999999999")

    resp = client.get("/messages", query_string={"tenant_id": "t-1", "to_number": "919999999999"})
    assert [m["content"] for m in resp.get_json()["messages"]] == ["b"]


def test_messages_unknown_tenant_is_empty(client):
    resp = client.get("/messages", query_string={"tenant_id": "nope"})
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "messages": []}
