"""
Atalhos para importar factories nos testes.

Exemplo de uso:
    from tests.factories import event_factory as f
    body = f.make_inbound_text("Oi")
"""

from .event_factory import *  # noqa: F401,F403
from .fakes import FakeHttp, FakePartner, FakeResponse, count_rows, make_tenant  # noqa: F401

__all__ = [
    "now_millis",
    "make_install_body",
    "make_inbound_message",
    "make_inbound_text",
    "make_message_event",
    "FakeHttp",
    "FakePartner",
    "FakeResponse",
    "count_rows",
    "make_tenant",
]
