# relay/logging.py
"""
Logger estruturado do relay.

- Uma linha JSON por registro: ts, level, msg, logger + extras (extra={...}).
- Exceções viram um campo curto "exc_short" (frame relevante + erro),
  sem o traceback completo.
- Chaves sensíveis (tokens, api keys) são redigidas antes de serializar.
"""

from __future__ import annotations

import json
import logging
import os
import traceback
import linecache
from datetime import datetime, timezone
from typing import Any, Dict

# chaves do LogRecord que não devem ir para o JSON
_RESERVED_KEYS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename", "module",
    "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created", "msecs",
    "relativeCreated", "thread", "threadName", "processName", "process", "message",
    "taskName",
}

_SENSITIVE_KEYS = {"token", "app_token", "api_key", "apikey", "authorization", "refresh_token", "auth_id"}


def _now_iso() -> str:
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _redact_value(key: str, value: Any) -> Any:
    if key.lower() in _SENSITIVE_KEYS and value:
        s = str(value)
        return s[:4] + "…redacted" if len(s) > 8 else "…redacted"
    return value


def redact(data: Any) -> Any:
    """Cópia de dicts/listas com as chaves sensíveis redigidas (recursivo)."""
    if isinstance(data, dict):
        return {k: redact(_redact_value(str(k), v)) for k, v in data.items()}
    if isinstance(data, list):
        return [redact(v) for v in data]
    return data


class JsonFormatter(logging.Formatter):
    """
    Formatter JSON enxuto. Não levanta exceção: se algo falhar ao montar
    o exc_short, marca "exc_in_formatter_error" e segue.
    """

    def _relevant_frame(self, tb) -> traceback.FrameSummary | None:
        frames = traceback.extract_tb(tb)
        if not frames:
            return None
        cwd = os.getcwd()
        for fr in reversed(frames):
            if fr.filename.startswith(cwd) and "site-packages" not in fr.filename:
                return fr
        return frames[-1]

    def _exc_short(self, exc_type, exc_value, tb) -> str | None:
        fr = self._relevant_frame(tb)
        name = getattr(exc_type, "__name__", str(exc_type))
        if fr is None:
            return f"{name}: {exc_value}"
        line = linecache.getline(fr.filename, fr.lineno).strip() or "<source not available>"
        return f'File "{fr.filename}", line {fr.lineno}, in {fr.name}\n    {line}\n{name}: {exc_value}'

    def format(self, record: logging.LogRecord) -> str:
        base: Dict[str, Any] = {
            "ts": _now_iso(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }

        for k, v in record.__dict__.items():
            if k in _RESERVED_KEYS or k.startswith("_"):
                continue
            base[k] = redact(_redact_value(k, v))

        if record.exc_info:
            try:
                short = self._exc_short(*record.exc_info)
                if short:
                    base["exc_short"] = short
            except Exception:
                base["exc_in_formatter_error"] = True

        return json.dumps(base, ensure_ascii=False, default=str)


def configure_logging(level: str = "INFO") -> None:
    """
    Configura o logger raiz com JsonFormatter.
    Deve ser chamado uma única vez na inicialização do app.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger(__name__).info("logging configured: JsonFormatter active")


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or "relay")
