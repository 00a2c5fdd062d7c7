from __future__ import annotations
from flask import Blueprint, request, jsonify, current_app

from relay.errors import ValidationError
from relay.logging import get_logger
from relay.services.messaging import query_messages

messages_api = Blueprint("messages_api", __name__)
logger = get_logger(__name__)

@messages_api.get("/messages")
def api_messages():
    tenant_id = request.args.get("tenant_id")
    to_number = request.args.get("to_number")
    try:
        rows = query_messages(current_app.config["DB_ENGINE"], tenant_id, to_number)
    except ValidationError as e:
        return jsonify({"error": e.message}), 400
    except Exception:
        logger.exception("messages.error", extra={"tenant_id": tenant_id})
        return jsonify({"error": "Failed to retrieve messages"}), 500
    return jsonify({"success": True, "messages": rows})
