# tests/integration/test_install_endpoint.py
"""
Testes de integração para POST /bitrix24/install.
"""

import pytest

from relay.errors import UpstreamError
from relay.models import get_provider_app, get_tenant
from relay.models.storage import gupshup_apps, tenants
from tests.factories import count_rows
from tests.factories import event_factory as f


def test_install_creates_tenant_and_app(client, engine, partner):
    resp = client.post("/bitrix24/install", json=f.make_install_body(domain="acme.bitrix24.com"))

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["success"] is True
    tenant_id = data["tenant_id"]
    assert data["redirect_url"] == f"https://relay.example.com/setup/{tenant_id}"

    assert count_rows(engine, tenants) == 1
    assert count_rows(engine, gupshup_apps) == 1
    tenant = get_tenant(engine, tenant_id)
    app = get_provider_app(engine, tenant_id)
    assert tenant["bitrix_domain"] == "acme.bitrix24.com"
    assert tenant["bitrix_refresh_token"] == "refresh-xyz"
    assert app["gupshup_app_id"] == "app-acme"
    assert app["status"] == "created"
    assert partner.calls == [("create_app", "acme", tenant_id)]


def test_install_accepts_form_encoded_body(client, engine):
    resp = client.post("/bitrix24/install", data=f.make_install_body())
    assert resp.status_code == 200
    assert count_rows(engine, tenants) == 1


@pytest.mark.parametrize("missing", ["DOMAIN", "AUTH_ID", "REFRESH_ID"])
def test_install_missing_required_field(client, engine, partner, missing):
    body = f.make_install_body()
    body.pop(missing)
    resp = client.post("/bitrix24/install", json=body)

    assert resp.status_code == 400
    data = resp.get_json()
    assert data["success"] is False
    assert data["error"] == "Missing required fields: DOMAIN, AUTH_ID, REFRESH_ID"
    assert count_rows(engine, tenants) == 0
    assert count_rows(engine, gupshup_apps) == 0
    assert partner.calls == []


def test_install_partner_failure_leaves_no_orphan_tenant(client, engine, partner):
    partner.fail_with = UpstreamError("GupShup partner API returned 500", details="partner down")
    resp = client.post("/bitrix24/install", json=f.make_install_body())

    assert resp.status_code == 500
    data = resp.get_json()
    assert data == {"success": False, "error": "Installation failed", "details": "partner down"}
    assert count_rows(engine, tenants) == 0
    assert count_rows(engine, gupshup_apps) == 0
