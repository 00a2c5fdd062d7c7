# relay/blueprints/health.py
"""
Blueprint simples de healthcheck.
Usado por Render, Railway, etc. para verificar se o app está ativo.
"""

from flask import Blueprint, jsonify

from relay.models import iso_now

health = Blueprint("health", __name__)

SERVICE_NAME = "WhatsApp-Bitrix24 Backend"
SERVICE_VERSION = "2.0.0"


@health.get("/health")
def get_health():
    return jsonify(
        {
            "status": "healthy",
            "timestamp": iso_now(),
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
        }
    )
