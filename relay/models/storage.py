from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Union
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    select,
    update,
)
from sqlalchemy.engine import Connection, Engine, make_url

Bind = Union[Engine, Connection]

APP_STATUS_CREATED = "created"
APP_STATUS_PHONE_CONFIGURED = "phone_configured"

DIRECTION_INBOUND = "inbound"
DIRECTION_OUTBOUND = "outbound"

# ---------- helpers ----------

def iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def _row_to_dict(row) -> Optional[Dict[str, Any]]:
    return dict(row._mapping) if row is not None else None

def make_engine(database_url: str, *, ssl: bool = False) -> Engine:
    """
    Cria o engine (pool de conexões) a partir de uma URL SQLAlchemy.

    - sqlite: garante o diretório do arquivo e libera uso entre threads
    - postgresql + ssl: exige TLS sem validar o certificado do servidor
    """
    url = make_url(database_url)
    connect_args: Dict[str, Any] = {}
    if url.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            os.makedirs(os.path.dirname(url.database) or ".", exist_ok=True)
    elif ssl and url.get_backend_name() == "postgresql":
        connect_args["sslmode"] = "require"
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)

@contextmanager
def get_conn(bind: Bind) -> Iterator[Connection]:
    """
    Conexão de vida curta: com Engine abre uma transação própria
    (commit/rollback automáticos); com Connection reaproveita a transação
    do chamador.
    """
    if isinstance(bind, Connection):
        yield bind
        return
    with bind.begin() as conn:
        yield conn

# ---------- schema / init ----------

metadata = MetaData()

tenants = Table(
    "tenants",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("bitrix_domain", Text, nullable=False),
    Column("bitrix_auth_id", Text, nullable=False),
    Column("bitrix_refresh_token", Text, nullable=False),
    Column("bitrix_member_id", Text),
    Column("bitrix_application_token", Text),
    Column("created_at", String(32), nullable=False),
)

# um app GupShup por tenant (PK = tenant_id)
gupshup_apps = Table(
    "gupshup_apps",
    metadata,
    Column("tenant_id", String(36), ForeignKey("tenants.id"), primary_key=True),
    Column("gupshup_app_id", Text, nullable=False),
    Column("gupshup_app_token", Text),
    Column("app_name", Text),
    Column("phone_number", Text),
    Column("status", String(32), nullable=False, default=APP_STATUS_CREATED),  # created | phone_configured
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

messages = Table(
    "messages",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("tenant_id", String(36), ForeignKey("tenants.id"), nullable=False),
    Column("gupshup_message_id", Text),
    Column("direction", String(16), nullable=False),         # inbound | outbound
    Column("from_number", Text),
    Column("to_number", Text),
    Column("message_type", String(32), nullable=False),      # text | image | video | audio | document | ...
    Column("content", Text),
    Column("status", String(64)),                            # sent | received | <eventType>
    Column("created_at", String(32), nullable=False),
)

Index("idx_messages_tenant_created", messages.c.tenant_id, messages.c.created_at)
Index("idx_messages_gupshup_tenant", messages.c.gupshup_message_id, messages.c.tenant_id)

def ensure_db(engine: Engine) -> None:
    metadata.create_all(engine)

# ---------- tenants ----------

def insert_tenant(
    bind: Bind,
    *,
    id: str,
    domain: str,
    auth_id: str,
    refresh_token: str,
    member_id: Optional[str] = None,
    application_token: Optional[str] = None,
    created_at: Optional[str] = None,
) -> None:
    with get_conn(bind) as conn:
        conn.execute(
            tenants.insert().values(
                id=id,
                bitrix_domain=domain,
                bitrix_auth_id=auth_id,
                bitrix_refresh_token=refresh_token,
                bitrix_member_id=member_id,
                bitrix_application_token=application_token,
                created_at=created_at or iso_now(),
            )
        )

def get_tenant(bind: Bind, tenant_id: str) -> Optional[Dict[str, Any]]:
    with get_conn(bind) as conn:
        row = conn.execute(select(tenants).where(tenants.c.id == tenant_id)).first()
        return _row_to_dict(row)

# ---------- gupshup_apps ----------

def insert_provider_app(
    bind: Bind,
    *,
    tenant_id: str,
    app_id: str,
    app_token: Optional[str],
    app_name: Optional[str],
    status: str = APP_STATUS_CREATED,
) -> None:
    now = iso_now()
    with get_conn(bind) as conn:
        conn.execute(
            gupshup_apps.insert().values(
                tenant_id=tenant_id,
                gupshup_app_id=app_id,
                gupshup_app_token=app_token,
                app_name=app_name,
                phone_number=None,
                status=status,
                created_at=now,
                updated_at=now,
            )
        )

def get_provider_app(bind: Bind, tenant_id: str) -> Optional[Dict[str, Any]]:
    with get_conn(bind) as conn:
        row = conn.execute(
            select(gupshup_apps).where(gupshup_apps.c.tenant_id == tenant_id)
        ).first()
        return _row_to_dict(row)

def update_provider_app_phone(
    bind: Bind,
    tenant_id: str,
    phone_number: str,
    *,
    status: str = APP_STATUS_PHONE_CONFIGURED,
) -> int:
    with get_conn(bind) as conn:
        res = conn.execute(
            update(gupshup_apps)
            .where(gupshup_apps.c.tenant_id == tenant_id)
            .values(phone_number=phone_number, status=status, updated_at=iso_now())
        )
        return res.rowcount

# ---------- messages ----------

def insert_message(
    bind: Bind,
    *,
    id: str,
    tenant_id: str,
    gupshup_message_id: Optional[str],
    direction: str,
    from_number: Optional[str],
    to_number: Optional[str],
    message_type: str,
    content: Optional[str],
    status: Optional[str],
    created_at: Optional[str] = None,
) -> None:
    with get_conn(bind) as conn:
        conn.execute(
            messages.insert().values(
                id=id,
                tenant_id=tenant_id,
                gupshup_message_id=gupshup_message_id,
                direction=direction,
                from_number=from_number,
                to_number=to_number,
                message_type=message_type,
                content=content,
                status=status,
                created_at=created_at or iso_now(),
            )
        )

def update_message_status(bind: Bind, tenant_id: str, gupshup_message_id: str, status: str) -> int:
    with get_conn(bind) as conn:
        res = conn.execute(
            update(messages)
            .where(
                messages.c.gupshup_message_id == gupshup_message_id,
                messages.c.tenant_id == tenant_id,
            )
            .values(status=status)
        )
        return res.rowcount

def list_messages(bind: Bind, tenant_id: str, *, to_number: Optional[str] = None) -> List[Dict[str, Any]]:
    q = select(messages).where(messages.c.tenant_id == tenant_id)
    if to_number:
        q = q.where(messages.c.to_number == to_number)
    q = q.order_by(messages.c.created_at.asc())
    with get_conn(bind) as conn:
        return [dict(r._mapping) for r in conn.execute(q)]
