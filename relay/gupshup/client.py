# relay/gupshup/client.py
from __future__ import annotations

import json
import uuid
from typing import Any, Dict, Optional

import requests

from relay.errors import UpstreamError
from relay.http import HttpClient, response_json
from relay.logging import get_logger
from relay.phones import mask_phone

logger = get_logger(__name__)

SUBMITTED = "submitted"
DEFAULT_SEND_ERROR = "Failed to send message via GupShup"


def build_text_form(*, source: str, destination: str, app_name: Optional[str], text: str) -> Dict[str, str]:
    """Corpo x-www-form-urlencoded da API /sm/api/v1/msg."""
    return {
        "channel": "whatsapp",
        "source": source,
        "destination": destination,
        "src.name": app_name or "",
        "message": json.dumps({"type": "text", "text": text}),
    }


class GupshupClient:
    """
    Envio de mensagens pela API de mensagens da GupShup (apikey do app do tenant).

    Resposta com status != "submitted" é falha, mesmo com HTTP 200.
    """

    def __init__(
        self,
        api_url: str,
        *,
        timeout: float = 10,
        dry_run: bool = False,
        http: Optional[HttpClient] = None,
    ):
        self.api_url = api_url
        self.dry_run = dry_run
        self.http = http or HttpClient(timeout=timeout, max_retries=0)

    def send_text(
        self,
        *,
        app_token: str,
        source: str,
        destination: str,
        app_name: Optional[str],
        text: str,
    ) -> Dict[str, Any]:
        form = build_text_form(source=source, destination=destination, app_name=app_name, text=text)

        if self.dry_run:
            # messageId fake para permitir vincular status no dev
            fake_id = f"DEV.{uuid.uuid4().hex[:18]}"
            logger.info(
                "gupshup.dry_run",
                extra={"url": self.api_url, "to": mask_phone(destination), "message_id": fake_id},
            )
            return {"status": SUBMITTED, "messageId": fake_id, "dry_run": True}

        try:
            resp = self.http.post_form(self.api_url, form, headers={"apikey": app_token})
        except requests.RequestException as e:
            logger.error("gupshup.network_error", extra={"to": mask_phone(destination), "error": str(e)})
            raise UpstreamError(str(e)) from e

        data = response_json(resp)
        if not resp.ok:
            logger.error("gupshup.error", extra={"status": resp.status_code, "detail": data})
            raise UpstreamError(data.get("message") or f"GupShup returned HTTP {resp.status_code}")

        if data.get("status") != SUBMITTED:
            logger.error("gupshup.not_submitted", extra={"to": mask_phone(destination), "detail": data})
            raise UpstreamError(data.get("message") or DEFAULT_SEND_ERROR)

        return data
