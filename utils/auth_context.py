from functools import wraps
from flask import g, request

from models import db
from models.user import User
from security.tokens import decode_access_token
from services.errors import InvalidInput, Unauthorized


def _bearer_token():
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    return header[len("Bearer "):].strip() or None


def load_current_user():
    g.user = None
    g.token_invalid = False

    token = _bearer_token()
    if not token:
        return

    claims = decode_access_token(token)
    user = db.session.get(User, claims["id"]) if claims else None
    if user is None:
        g.token_invalid = True
        return

    g.user = user


def require_identity():
    """Raise unless the request carries a usable token."""
    if getattr(g, "user", None) is not None:
        return
    if getattr(g, "token_invalid", False):
        raise InvalidInput("Invalid token.")
    raise Unauthorized("Access denied. No token provided.")


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        require_identity()
        return fn(*args, **kwargs)
    return wrapper
