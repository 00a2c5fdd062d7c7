# relay/__init__.py
"""
Fábrica principal do Flask App.

- Cria e configura a instância do Flask.
- Carrega configurações do ambiente (via relay.settings).
- Inicializa logging.
- Cria o engine do banco e garante as tabelas.
- Monta os clientes GupShup (Partner API e envio) uma única vez.
- Registra blueprints (bitrix/setup/outbound/messages/webhook/health).
"""

from __future__ import annotations

from typing import Any, Mapping

from flask import Flask
from relay.settings import load_settings
from relay.logging import configure_logging, get_logger
from relay.models import ensure_db, make_engine
from relay.gupshup.client import GupshupClient
from relay.gupshup.partner import PartnerClient


def create_app(config_name: str | None = None, overrides: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__)

    # 1) Config
    settings = load_settings(config_name)
    app.config.update(settings)
    if overrides:
        app.config.update(overrides)

    # 2) Logging
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))
    log = get_logger(__name__)
    log.info("app.init", extra={"env": app.config.get("CONFIG_NAME", "dev")})

    # 3) Banco (pool compartilhado pelo processo)
    if "DB_ENGINE" not in app.config:
        app.config["DB_ENGINE"] = make_engine(
            app.config["DATABASE_URL"],
            ssl=bool(app.config.get("DATABASE_SSL", False)),
        )
    ensure_db(app.config["DB_ENGINE"])
    log.info("db.ready", extra={"backend": app.config["DB_ENGINE"].url.get_backend_name()})

    # 4) Clientes GupShup
    if "PARTNER_CLIENT" not in app.config:
        app.config["PARTNER_CLIENT"] = PartnerClient(
            app.config.get("GUPSHUP_PARTNER_API_KEY"),
            base_url=app.config["GUPSHUP_PARTNER_API_BASE"],
            webhook_base_url=app.config["BASE_URL"],
            timeout=app.config.get("PARTNER_API_TIMEOUT"),
        )
    if "GUPSHUP_CLIENT" not in app.config:
        app.config["GUPSHUP_CLIENT"] = GupshupClient(
            app.config["GUPSHUP_MESSAGE_API_URL"],
            timeout=app.config.get("SEND_TIMEOUT", 10),
            dry_run=bool(app.config.get("DRY_RUN", False)),
        )
    if not app.config.get("GUPSHUP_PARTNER_API_KEY"):
        log.warning("config.incomplete", extra={"hint": "GUPSHUP_PARTNER_API_KEY ausente; instalações vão falhar."})

    # 5) Blueprints
    from relay.blueprints.bitrix import bitrix
    from relay.blueprints.setup import setup
    from relay.blueprints.outbound import outbound
    from relay.blueprints.messages import messages_api
    from relay.blueprints.webhook import webhook
    from relay.blueprints.health import health

    app.register_blueprint(bitrix)
    app.register_blueprint(setup)
    app.register_blueprint(outbound)
    app.register_blueprint(messages_api)
    app.register_blueprint(webhook)
    app.register_blueprint(health)

    return app
