# relay/services/inbound.py
"""
Processamento do webhook da GupShup para um tenant.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from sqlalchemy.engine import Engine

from relay.errors import NotFoundError
from relay.flows.normalizer import normalize_webhook
from relay.logging import get_logger
from relay.models import DIRECTION_INBOUND, get_provider_app, insert_message, update_message_status
from relay.phones import mask_phone
from relay.services.phone_setup import APP_NOT_FOUND

logger = get_logger(__name__)


def handle_webhook(engine: Engine, tenant_id: str, body: Dict[str, Any]) -> Optional[str]:
    """
    Grava a mensagem recebida ou atualiza o status de uma enviada.

    Devolve o tipo de evento processado ("message" / "status"),
    ou None quando o corpo foi ignorado.
    """
    app = get_provider_app(engine, tenant_id)
    if not app:
        raise NotFoundError(APP_NOT_FOUND)

    evt = normalize_webhook(body)
    if evt is None:
        return None

    if evt["kind"] == "message":
        insert_message(
            engine,
            id=str(uuid.uuid4()),
            tenant_id=tenant_id,
            gupshup_message_id=evt.get("msg_id"),
            direction=DIRECTION_INBOUND,
            from_number=evt["from"],
            to_number=app.get("phone_number"),
            message_type=evt["message_type"],
            content=evt["text"],
            status="received",
        )
        logger.info(
            "webhook.inbound",
            extra={"tenant_id": tenant_id, "from": mask_phone(evt["from"]), "message_type": evt["message_type"]},
        )
        return "message"

    updated = update_message_status(engine, tenant_id, evt["msg_id"], evt["status"])
    if updated:
        logger.info("webhook.status", extra={"tenant_id": tenant_id, "msg_id": evt["msg_id"], "status": evt["status"]})
    else:
        logger.debug("webhook.status_unmatched", extra={"tenant_id": tenant_id, "msg_id": evt["msg_id"]})
    return "status"
