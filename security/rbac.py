from functools import wraps
from flask import g

from services.errors import Forbidden
from utils.auth_context import require_identity


def require_roles(*role_names: str):
    """
    Usage: @require_roles("ADMIN")

    Role comes from the stored user, so a demotion takes effect before the token expires.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            require_identity()

            if g.user.role not in role_names:
                raise Forbidden("Access denied. Admins only.")

            return fn(*args, **kwargs)
        return wrapper
    return decorator
