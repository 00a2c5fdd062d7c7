# relay/blueprints/webhook.py
from __future__ import annotations

import json
from flask import Blueprint, request, jsonify, current_app

from relay.errors import NotFoundError
from relay.logging import get_logger
from relay.services.inbound import handle_webhook

logger = get_logger(__name__)
webhook = Blueprint("webhook", __name__)


@webhook.post("/webhook/<tenant_id>")
def receive(tenant_id: str):
    # TODO: validar a origem do callback (a GupShup não assina o corpo; avaliar token na URL)
    body = request.get_json(silent=True)
    try:
        raw_size = len(json.dumps(body, ensure_ascii=False).encode("utf-8")) if body is not None else 0
    except (TypeError, ValueError):
        raw_size = 0
    if not isinstance(body, dict):
        body = {}

    # corpo bruto não vai para o log: traz source/sender.phone sem máscara
    logger.info("webhook.incoming", extra={"tenant_id": tenant_id, "type": body.get("type"), "raw_size": raw_size})

    try:
        kind = handle_webhook(current_app.config["DB_ENGINE"], tenant_id, body)
        logger.debug("webhook.processed", extra={"tenant_id": tenant_id, "kind": kind})
        return jsonify({"success": True})
    except NotFoundError as e:
        logger.warning("webhook.unknown_tenant", extra={"tenant_id": tenant_id})
        return jsonify({"error": e.message}), 404
    except Exception as e:
        logger.exception("webhook.handler_error", extra={"tenant_id": tenant_id, "error_message": str(e)})
        return jsonify({"error": "Webhook processing failed"}), 500
