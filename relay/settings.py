# relay/settings.py
"""
Carrega e organiza todas as configurações do relay.

- Lê variáveis de ambiente (.env.<env>) usando dotenv
- Monta um dicionário simples com todas as chaves relevantes
- Define valores padrão quando necessário
- Evita múltiplos load_dotenv (feito apenas aqui)

Uso:
    from relay.settings import load_settings
    settings = load_settings("dev")
"""

from __future__ import annotations

import os
from pathlib import Path
from dotenv import load_dotenv


DEFAULT_PARTNER_API_BASE = "https://api.gupshup.io/partner/v1"
DEFAULT_MESSAGE_API_URL = "https://api.gupshup.io/sm/api/v1/msg"
DEFAULT_BASE_URL = "https://your-server.com"
DEFAULT_DATABASE_URL = "sqlite:///data/app.db"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# -----------------------------------------------------------
# Função principal
# -----------------------------------------------------------
def load_settings(env_name: str | None = None) -> dict:
    """
    Carrega as variáveis de ambiente para o app Flask.
    Retorna um dicionário pronto para app.config.update().
    """
    config_name = env_name or os.getenv("CONFIG_NAME", "dev")
    env_file = Path(f".env.{config_name}")

    if env_file.exists():
        load_dotenv(env_file.as_posix(), override=True)
    else:
        generic_env = Path(".env")
        if generic_env.exists():
            load_dotenv(generic_env.as_posix(), override=False)

    dry_run_flag = os.getenv("DRY_RUN", "0").strip() == "1"
    runtime_env = (os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development").strip().lower()

    settings = {
        # Identificação
        "CONFIG_NAME": config_name,

        # Servidor
        "PORT": _int_env("PORT", 3000),
        "LOG_LEVEL": (os.getenv("LOG_LEVEL", "DEBUG" if dry_run_flag else "INFO")).upper(),
        "BASE_URL": (os.getenv("BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),

        # Banco (SQLAlchemy URL); TLS só em produção
        "DATABASE_URL": os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        "DATABASE_SSL": runtime_env == "production",

        # GupShup Partner API (provisionamento de apps/números)
        "GUPSHUP_PARTNER_API_KEY": os.getenv("GUPSHUP_PARTNER_API_KEY"),
        "GUPSHUP_PARTNER_API_BASE": os.getenv("GUPSHUP_PARTNER_API_BASE", DEFAULT_PARTNER_API_BASE),
        "PARTNER_API_TIMEOUT": _int_env("PARTNER_API_TIMEOUT", 30),

        # GupShup API de envio
        "GUPSHUP_MESSAGE_API_URL": os.getenv("GUPSHUP_MESSAGE_API_URL", DEFAULT_MESSAGE_API_URL),
        "SEND_TIMEOUT": _int_env("SEND_TIMEOUT", 10),

        # Modo de execução
        "DRY_RUN": dry_run_flag,
    }

    return settings
