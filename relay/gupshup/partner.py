# relay/gupshup/partner.py
"""
Cliente da GupShup Partner API (provisionamento).

Três chamadas, todas com Bearer <partner api key>, uma tentativa só:
- create_app(company, tenant_id)         POST /apps
- assign_phone_number(app_id, phone)     POST /apps/{app_id}/phone
- request_new_phone_number(app_id)       POST /apps/{app_id}/phone/new

Qualquer falha (rede, timeout, status != 2xx, resposta incompleta) vira
UpstreamError e sobe para o chamador; não há retry.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, TypedDict

import requests

from relay.errors import UpstreamError
from relay.http import HttpClient, response_json
from relay.logging import get_logger
from relay.phones import mask_phone

logger = get_logger(__name__)


class PartnerApp(TypedDict):
    app_id: str
    app_token: Optional[str]
    app_name: Optional[str]


class PartnerClient:
    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str,
        webhook_base_url: str,
        timeout: Optional[float] = 30,
        http: Optional[HttpClient] = None,
    ):
        self.api_key = api_key
        self.webhook_base_url = webhook_base_url.rstrip("/")
        self.http = http or HttpClient(base_url=base_url, timeout=timeout, max_retries=0)

    def webhook_url_for(self, tenant_id: str) -> str:
        return f"{self.webhook_base_url}/webhook/{tenant_id}"

    def _post(self, path: str, payload: Dict[str, Any], op: str) -> Dict[str, Any]:
        if not self.api_key:
            logger.error("partner.misconfig", extra={"op": op})
            raise UpstreamError("GupShup partner API key is not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            resp = self.http.post_json(path, payload, headers=headers)
        except requests.RequestException as e:
            logger.error("partner.network_error", extra={"op": op, "error": str(e)})
            raise UpstreamError(f"GupShup partner API request failed: {e}") from e

        data = response_json(resp)
        if not resp.ok:
            detail = data.get("message") or data.get("error") or data.get("raw")
            logger.error("partner.error", extra={"op": op, "status": resp.status_code, "detail": detail})
            raise UpstreamError(
                f"GupShup partner API returned {resp.status_code}",
                details=str(detail) if detail else None,
            )
        return data

    def create_app(self, company: str, tenant_id: str) -> PartnerApp:
        payload = {
            "name": f"{company}-WhatsApp",
            "description": f"WhatsApp integration for {company}",
            "webhook_url": self.webhook_url_for(tenant_id),
        }
        data = self._post("/apps", payload, op="create_app")
        # alguns ambientes devolvem o app aninhado em "app"
        body = data.get("app") if isinstance(data.get("app"), dict) else data
        app_id = body.get("app_id") or body.get("id")
        if not app_id:
            logger.error("partner.create_app_incomplete", extra={"tenant_id": tenant_id, "keys": sorted(body)})
            raise UpstreamError("GupShup partner API did not return an app_id")

        logger.info("partner.app_created", extra={"tenant_id": tenant_id, "app_id": app_id})
        return {
            "app_id": str(app_id),
            "app_token": body.get("app_token") or body.get("token"),
            "app_name": body.get("app_name") or body.get("name") or payload["name"],
        }

    def assign_phone_number(self, app_id: str, phone_number: str) -> Dict[str, Any]:
        data = self._post(f"/apps/{app_id}/phone", {"phone_number": phone_number}, op="assign_phone")
        logger.info("partner.phone_assigned", extra={"app_id": app_id, "phone": mask_phone(phone_number)})
        return data

    def request_new_phone_number(self, app_id: str) -> str:
        data = self._post(f"/apps/{app_id}/phone/new", {}, op="request_phone")
        phone_number = data.get("phone_number")
        if not phone_number:
            logger.error("partner.request_phone_incomplete", extra={"app_id": app_id})
            raise UpstreamError("GupShup partner API did not return a phone_number")
        logger.info("partner.phone_allocated", extra={"app_id": app_id, "phone": mask_phone(phone_number)})
        return str(phone_number)
