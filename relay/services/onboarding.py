# relay/services/onboarding.py
"""
Instalação do app no Bitrix24 -> tenant + app GupShup.

O insert do tenant, a criação do app na Partner API e o insert do app
rodam na mesma transação: se a GupShup falhar, o tenant não fica órfão.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.engine import Engine

from relay.errors import ValidationError
from relay.gupshup.partner import PartnerClient
from relay.logging import get_logger
from relay.models import APP_STATUS_CREATED, get_conn, insert_provider_app, insert_tenant

logger = get_logger(__name__)

REQUIRED_INSTALL_FIELDS = ("DOMAIN", "AUTH_ID", "REFRESH_ID")


def company_from_domain(domain: str) -> str:
    """'acme.bitrix24.com' -> 'acme'"""
    return domain.strip().split(".")[0]


def install_tenant(
    engine: Engine,
    partner: PartnerClient,
    data: Mapping[str, Any],
    *,
    base_url: str,
) -> Dict[str, Any]:
    missing = [k for k in REQUIRED_INSTALL_FIELDS if not data.get(k)]
    if missing:
        logger.warning("install.missing_fields", extra={"missing": missing})
        raise ValidationError("Missing required fields: " + ", ".join(REQUIRED_INSTALL_FIELDS))

    domain = str(data["DOMAIN"])
    tenant_id = str(uuid.uuid4())
    member_id: Optional[str] = data.get("member_id")
    application_token: Optional[str] = data.get("APPLICATION_TOKEN")

    with get_conn(engine) as conn:
        insert_tenant(
            conn,
            id=tenant_id,
            domain=domain,
            auth_id=str(data["AUTH_ID"]),
            refresh_token=str(data["REFRESH_ID"]),
            member_id=member_id,
            application_token=application_token,
        )
        app = partner.create_app(company_from_domain(domain), tenant_id)
        insert_provider_app(
            conn,
            tenant_id=tenant_id,
            app_id=app["app_id"],
            app_token=app["app_token"],
            app_name=app["app_name"],
            status=APP_STATUS_CREATED,
        )

    logger.info("install.success", extra={"tenant_id": tenant_id, "domain": domain, "app_id": app["app_id"]})
    return {
        "tenant_id": tenant_id,
        "redirect_url": f"{base_url.rstrip('/')}/setup/{tenant_id}",
    }
