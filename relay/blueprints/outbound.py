# relay/blueprints/outbound.py
"""
Blueprint de envio (tenant -> GupShup), endpoint /send.
"""

from flask import Blueprint, request, jsonify, current_app

from relay.errors import RelayError
from relay.logging import get_logger
from relay.phones import mask_phone
from relay.services.messaging import send_message

outbound = Blueprint("outbound", __name__)
logger = get_logger(__name__)


@outbound.post("/send")
def send():
    """
    POST /send
    Corpo esperado:
    {
      "tenant_id": "<uuid>",
      "to_number": "+91 78348 11114",
      "message": "Olá!"
    }

    - 400: campos ausentes, app não configurado ou número inválido
    - 500: GupShup falhou ou não devolveu "submitted" (nada é gravado)
    """
    cfg = current_app.config
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    tenant_id = data.get("tenant_id")

    try:
        result = send_message(
            cfg["DB_ENGINE"],
            cfg["GUPSHUP_CLIENT"],
            tenant_id=tenant_id,
            to_number=data.get("to_number"),
            message=data.get("message"),
        )
        return jsonify({"success": True, "message": "Message sent successfully", "gupshup_response": result})
    except RelayError as e:
        log = logger.warning if e.status_code < 500 else logger.error
        log(
            "send.rejected" if e.status_code < 500 else "send.error_upstream",
            extra={"tenant_id": tenant_id, "to": mask_phone(data.get("to_number")), "error": e.message},
        )
        return jsonify({"error": e.message}), e.status_code
    except Exception as e:
        logger.exception("send.error_generic", extra={"tenant_id": tenant_id})
        return jsonify({"error": str(e)}), 500
