# relay/blueprints/setup.py
from flask import Blueprint, request, jsonify, current_app

from relay.errors import RelayError
from relay.logging import get_logger
from relay.services.phone_setup import setup_phone

setup = Blueprint("setup", __name__)
logger = get_logger(__name__)


@setup.post("/setup/<tenant_id>/phone")
def configure_phone(tenant_id: str):
    """
    POST /setup/<tenant_id>/phone
    Corpo: {"setup_type": "existing" | "new", "phone_number": "9178..."}
    """
    cfg = current_app.config
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form.to_dict()

    try:
        result = setup_phone(
            cfg["DB_ENGINE"],
            cfg["PARTNER_CLIENT"],
            tenant_id,
            setup_type=data.get("setup_type"),
            phone_number=data.get("phone_number"),
        )
        return jsonify({"success": True, **result})
    except RelayError as e:
        if e.status_code >= 500:
            logger.error("setup.error_upstream", extra={"tenant_id": tenant_id, "error": e.message})
        return jsonify({"error": e.message}), e.status_code
    except Exception as e:
        logger.exception("setup.error_generic", extra={"tenant_id": tenant_id})
        return jsonify({"error": str(e)}), 500
