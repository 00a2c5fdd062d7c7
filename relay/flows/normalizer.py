# relay/flows/normalizer.py
"""
Normalização do callback da GupShup para um evento simples e previsível.

Módulo **puro** (sem Flask, sem banco) para facilitar testes unitários.

Corpo recebido em POST /webhook/<tenant_id>:
  {"type": "message",       "payload": {"id", "source", "type", "payload": {...}, "sender": {...}}}
  {"type": "message-event", "payload": {"id", "eventType" | "type", "destination"}}

Formato de saída (um dict, ou None quando não há nada a fazer):
  {"kind": "message", "msg_id": "ABEGkZ...", "from": "9178...", "message_type": "image", "text": "[Image]"}
  {"kind": "status",  "msg_id": "ee4a68a0-...", "status": "delivered"}
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional, TypedDict

from relay.logging import get_logger

logger = get_logger(__name__)

WEBHOOK_MESSAGE = "message"
WEBHOOK_MESSAGE_EVENT = "message-event"


class InboundMessageEvent(TypedDict):
    kind: Literal["message"]
    msg_id: Optional[str]
    from_: str  # exportado como "from"
    message_type: str
    text: str


class StatusEvent(TypedDict):
    kind: Literal["status"]
    msg_id: str
    status: str


NormalizedEvent = Dict[str, Any]


# -----------------------------
# Texto de exibição por subtipo
# -----------------------------
_PLACEHOLDERS = {
    "image": "[Image]",
    "video": "[Video]",
    "audio": "[Audio]",
    "document": "[Document]",
}


def display_text(message_type: str, inner: Dict[str, Any]) -> str:
    """
    Converte o payload interno de uma mensagem em texto exibível:

    - text: o próprio texto
    - image / video: legenda, ou placeholder
    - audio: sempre placeholder
    - document: nome do arquivo, ou placeholder
    - qualquer outro subtipo: "[<tipo>]"
    """
    if message_type == "text":
        return str(inner.get("text") or "")
    if message_type in ("image", "video"):
        return str(inner.get("caption") or _PLACEHOLDERS[message_type])
    if message_type == "audio":
        return _PLACEHOLDERS["audio"]
    if message_type == "document":
        return str(inner.get("filename") or _PLACEHOLDERS["document"])

    logger.warning("webhook.unknown_message_type", extra={"message_type": message_type})
    return f"[{message_type}]"


# -----------------------------
# Função principal
# -----------------------------
def normalize_webhook(body: Dict[str, Any]) -> Optional[NormalizedEvent]:
    """
    Converte o corpo bruto do webhook em um evento normalizado.

    Tolerante a campos ausentes: nunca levanta por payload malformado,
    apenas devolve None (e o handler responde sucesso sem gravar nada).
    """
    body = _safe_dict(body)
    kind = body.get("type")
    payload = body.get("payload")
    if not isinstance(payload, dict):
        return None

    if kind == WEBHOOK_MESSAGE:
        return _normalize_message(payload)
    if kind == WEBHOOK_MESSAGE_EVENT:
        return _normalize_status(payload)

    logger.info("webhook.ignored_type", extra={"type": kind})
    return None


def _normalize_message(payload: Dict[str, Any]) -> Optional[NormalizedEvent]:
    sender = _safe_dict(payload.get("sender"))
    from_ = str(payload.get("source") or sender.get("phone") or "")
    mtype = str(payload.get("type") or "")
    if not from_ or not mtype:
        logger.warning("webhook.message_incomplete", extra={"has_from": bool(from_), "has_type": bool(mtype)})
        return None

    evt: InboundMessageEvent = {  # type: ignore[typeddict-item]
        "kind": "message",
        "msg_id": str(payload["id"]) if payload.get("id") else None,
        "from_": from_,
        "message_type": mtype,
        "text": display_text(mtype, _safe_dict(payload.get("payload"))),
    }
    return _export(evt)


def _normalize_status(payload: Dict[str, Any]) -> Optional[NormalizedEvent]:
    msg_id = payload.get("id")
    status = payload.get("eventType") or payload.get("type")
    if not msg_id or not status:
        logger.warning("webhook.status_incomplete", extra={"has_id": bool(msg_id), "has_status": bool(status)})
        return None
    evt: StatusEvent = {"kind": "status", "msg_id": str(msg_id), "status": str(status)}
    return dict(evt)


# -----------------------------
# Helpers internos
# -----------------------------
def _safe_dict(x: Any) -> dict:
    return x if isinstance(x, dict) else {}


def _export(evt: Dict[str, Any]) -> NormalizedEvent:
    """Troca a chave interna 'from_' por 'from' antes de devolver o evento."""
    evt = dict(evt)
    if "from_" in evt:
        evt["from"] = evt.pop("from_")
    return evt
