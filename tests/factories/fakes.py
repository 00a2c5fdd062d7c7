# tests/factories/fakes.py
"""
Dublês para a GupShup: resposta HTTP fake, HttpClient fake e Partner fake.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select

from relay.models import insert_provider_app, insert_tenant, update_provider_app_phone


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None):
        self.status_code = status_code
        self._body = body

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    @property
    def text(self) -> str:
        if isinstance(self._body, str):
            return self._body
        return json.dumps(self._body)

    def json(self):
        if isinstance(self._body, str):
            raise ValueError("not json")
        return self._body


class FakeHttp:
    """Registra as chamadas e devolve respostas enfileiradas (ou levanta)."""

    def __init__(self, *responses: Any):
        self.responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def queue(self, item: Any) -> None:
        self.responses.append(item)

    def _next(self, call: Dict[str, Any]):
        self.calls.append(call)
        item = self.responses.pop(0) if self.responses else FakeResponse(200, {})
        if isinstance(item, Exception):
            raise item
        return item

    def post_json(self, path: str, payload: Dict[str, Any], **kwargs):
        return self._next({"path": path, "json": payload, "headers": kwargs.get("headers", {})})

    def post_form(self, path: str, data: Dict[str, Any], **kwargs):
        return self._next({"path": path, "data": data, "headers": kwargs.get("headers", {})})


class FakePartner:
    def __init__(self, new_number: str = "918000000001"):
        self.calls: List[tuple] = []
        self.new_number = new_number
        self.fail_with: Optional[Exception] = None

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def create_app(self, company: str, tenant_id: str):
        self.calls.append(("create_app", company, tenant_id))
        self._maybe_fail()
        return {"app_id": f"app-{company}", "app_token": "tok-123", "app_name": f"{company}-WhatsApp"}

    def assign_phone_number(self, app_id: str, phone_number: str):
        self.calls.append(("assign_phone_number", app_id, phone_number))
        self._maybe_fail()
        return {"status": "success"}

    def request_new_phone_number(self, app_id: str) -> str:
        self.calls.append(("request_new_phone_number", app_id))
        self._maybe_fail()
        return self.new_number


def make_tenant(engine, tenant_id: str = "t-1", *, phone_number: Optional[str] = "918000000001", app_token: str = "tok-123"):
    """Tenant + app GupShup prontos (phone_number=None deixa o app em 'created')."""
    insert_tenant(engine, id=tenant_id, domain=f"{tenant_id}.bitrix24.com", auth_id="a", refresh_token="r")
    insert_provider_app(engine, tenant_id=tenant_id, app_id=f"app-{tenant_id}", app_token=app_token, app_name=f"{tenant_id}-WhatsApp")
    if phone_number:
        update_provider_app_phone(engine, tenant_id, phone_number)
    return tenant_id


def count_rows(engine, table) -> int:
    with engine.connect() as conn:
        return conn.execute(select(func.count()).select_from(table)).scalar_one()
