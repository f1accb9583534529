import json
from flask import g, request
from models import db
from models.audit_log import AuditLog


def _client_ip():
    # first hop of X-Forwarded-For is the original client
    forwarded = request.headers.get("X-Forwarded-For", "")
    ip = forwarded.split(",")[0].strip() if forwarded else request.remote_addr
    return ip[:64] if ip else None


def log_event(action: str, user_id=None, entity=None, entity_id=None, metadata=None):
    """Persist one audit row. ``user_id`` defaults to the authenticated caller."""
    if user_id is None and getattr(g, "user", None) is not None:
        user_id = g.user.id
    user_agent = request.headers.get("User-Agent", "")

    row = AuditLog(
        user_id=user_id,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        ip=_client_ip(),
        user_agent=user_agent[:255] if user_agent else None,
        metadata_json=json.dumps(metadata, default=str) if metadata else None,
    )
    db.session.add(row)
    db.session.commit()
