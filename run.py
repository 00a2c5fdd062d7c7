# run.py
"""
Ponto de entrada simples para desenvolvimento.

- Carrega o .env específico do ambiente (ex.: .env.dev, .env.prod)
- Cria o app via factory (create_app)
- Lê configurações SOMENTE de app.config
- Faz um log de inicialização em JSON
- Sobe o servidor embutido do Flask (em produção: gunicorn 'run:app')
"""

from __future__ import annotations

import os
import sys

from relay import create_app
from relay.logging import get_logger

CONFIG_NAME = os.environ.get("CONFIG_NAME", "dev")

# load_settings (dentro do create_app) cuida do .env.<env>
app = create_app(CONFIG_NAME)


if __name__ == "__main__":
    cfg = app.config
    log = get_logger("run")
    port = int(cfg.get("PORT", 3000))

    log.info(
        "server.start",
        extra={
            "env": CONFIG_NAME,
            "port": port,
            "python": sys.version.split()[0],
            "base_url": cfg.get("BASE_URL"),
            "db_backend": cfg["DB_ENGINE"].url.get_backend_name(),
            "partnerKey_set": bool(cfg.get("GUPSHUP_PARTNER_API_KEY")),
            "dry_run": bool(cfg.get("DRY_RUN", False)),
        },
    )
    log.info("server.health", extra={"url": f"http://localhost:{port}/health"})

    app.run(host="0.0.0.0", port=port)
