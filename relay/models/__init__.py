# relay/models/__init__.py
from .storage import (
    APP_STATUS_CREATED,
    APP_STATUS_PHONE_CONFIGURED,
    DIRECTION_INBOUND,
    DIRECTION_OUTBOUND,
    make_engine,
    ensure_db,
    get_conn,
    insert_tenant,
    get_tenant,
    insert_provider_app,
    get_provider_app,
    update_provider_app_phone,
    insert_message,
    update_message_status,
    list_messages,
    iso_now,
)
