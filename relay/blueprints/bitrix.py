# relay/blueprints/bitrix.py
"""
Blueprint de instalação do Bitrix24 (POST /bitrix24/install).

O Bitrix24 pode mandar JSON ou form-urlencoded; aceitamos os dois e,
como último recurso, a query string.
"""

from flask import Blueprint, request, jsonify, current_app

from relay.errors import RelayError, ValidationError
from relay.logging import get_logger
from relay.services.onboarding import install_tenant

bitrix = Blueprint("bitrix", __name__)
logger = get_logger(__name__)


def _install_data() -> dict:
    data = request.get_json(silent=True)
    if isinstance(data, dict) and data:
        return data
    if request.form:
        return request.form.to_dict()
    return request.args.to_dict()


@bitrix.post("/bitrix24/install")
def install():
    """
    POST /bitrix24/install
    Corpo: {DOMAIN, AUTH_ID, AUTH_EXPIRES, REFRESH_ID, member_id, APPLICATION_TOKEN}

    - 400 se faltar DOMAIN/AUTH_ID/REFRESH_ID (nada é gravado)
    - 200 {success, tenant_id, redirect_url}
    - 500 se a GupShup ou o banco falharem (transação desfeita)
    """
    cfg = current_app.config
    data = _install_data()
    logger.info(
        "install.request",
        extra={"domain": data.get("DOMAIN"), "member_id": data.get("member_id"), "content_type": request.content_type},
    )

    try:
        result = install_tenant(
            cfg["DB_ENGINE"],
            cfg["PARTNER_CLIENT"],
            data,
            base_url=cfg.get("BASE_URL", ""),
        )
        return jsonify({"success": True, **result})
    except ValidationError as e:
        return jsonify({"success": False, "error": e.message}), 400
    except RelayError as e:
        logger.error("install.error_upstream", extra={"domain": data.get("DOMAIN"), "error": e.message})
        return jsonify({"success": False, "error": "Installation failed", "details": e.details or e.message}), 500
    except Exception as e:
        logger.exception("install.error_generic", extra={"domain": data.get("DOMAIN")})
        return jsonify({"success": False, "error": "Installation failed", "details": str(e)}), 500
