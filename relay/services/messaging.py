# relay/services/messaging.py
"""
Envio (tenant -> GupShup) e consulta do log de mensagens.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Engine

from relay.errors import ValidationError
from relay.gupshup.client import GupshupClient
from relay.logging import get_logger
from relay.models import DIRECTION_OUTBOUND, get_provider_app, insert_message, list_messages
from relay.phones import format_phone_for_gupshup, mask_phone

logger = get_logger(__name__)

NOT_CONFIGURED = "WhatsApp not configured for this tenant"


def send_message(
    engine: Engine,
    gupshup: GupshupClient,
    *,
    tenant_id: Optional[str],
    to_number: Optional[str],
    message: Optional[str],
) -> Dict[str, Any]:
    """
    Envia um texto pelo app do tenant e grava a mensagem como "sent".

    Só grava depois que a GupShup confirma "submitted"; qualquer falha
    sobe como UpstreamError sem tocar no banco.
    """
    if not tenant_id or not to_number or not message:
        raise ValidationError("Missing required fields")
    if not isinstance(message, str) or not isinstance(to_number, str) or not isinstance(tenant_id, str):
        raise ValidationError("tenant_id, to_number and message must be strings")

    app = get_provider_app(engine, tenant_id)
    if not app or not app.get("gupshup_app_token") or not app.get("phone_number"):
        raise ValidationError(NOT_CONFIGURED)

    destination = format_phone_for_gupshup(to_number)

    logger.info("send.request", extra={"tenant_id": tenant_id, "to": mask_phone(destination)})
    result = gupshup.send_text(
        app_token=app["gupshup_app_token"],
        source=app["phone_number"],
        destination=destination,
        app_name=app.get("app_name"),
        text=message,
    )

    insert_message(
        engine,
        id=str(uuid.uuid4()),
        tenant_id=tenant_id,
        gupshup_message_id=result.get("messageId"),
        direction=DIRECTION_OUTBOUND,
        from_number=app["phone_number"],
        to_number=destination,
        message_type="text",
        content=message,
        status="sent",
    )
    logger.info("send.success", extra={"tenant_id": tenant_id, "message_id": result.get("messageId")})
    return result


def query_messages(engine: Engine, tenant_id: Optional[str], to_number: Optional[str] = None) -> List[Dict[str, Any]]:
    if not tenant_id:
        raise ValidationError("Missing tenant_id")
    return list_messages(engine, tenant_id, to_number=to_number)
