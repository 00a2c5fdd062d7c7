# relay/services/phone_setup.py
from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.engine import Engine

from relay.errors import NotFoundError, ValidationError
from relay.gupshup.partner import PartnerClient
from relay.logging import get_logger
from relay.models import get_provider_app, update_provider_app_phone
from relay.phones import mask_phone

logger = get_logger(__name__)

SETUP_EXISTING = "existing"
NEXT_STEP = "verification"
APP_NOT_FOUND = "GupShup app not found for tenant"


def setup_phone(
    engine: Engine,
    partner: PartnerClient,
    tenant_id: str,
    *,
    setup_type: Optional[str],
    phone_number: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Configura o número do app GupShup do tenant.

    setup_type == "existing" -> associa o número informado;
    qualquer outro valor     -> pede um número novo e usa o devolvido.
    Em ambos os casos o app passa para "phone_configured".
    """
    app = get_provider_app(engine, tenant_id)
    if not app:
        raise NotFoundError(APP_NOT_FOUND)

    if setup_type == SETUP_EXISTING:
        if not phone_number:
            raise ValidationError("phone_number is required when setup_type is 'existing'")
        partner.assign_phone_number(app["gupshup_app_id"], phone_number)
    else:
        phone_number = partner.request_new_phone_number(app["gupshup_app_id"])

    update_provider_app_phone(engine, tenant_id, phone_number)
    logger.info(
        "setup.phone_configured",
        extra={"tenant_id": tenant_id, "setup_type": setup_type, "phone": mask_phone(phone_number)},
    )
    return {"phone_number": phone_number, "next_step": NEXT_STEP}
