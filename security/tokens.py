from datetime import datetime, timedelta
from typing import Optional

from flask import current_app
from jose import jwt, JWTError

from models.user import User


def create_access_token(user: User) -> str:
    """Signed bearer token carrying the caller identity: ``{id, role, exp}``."""
    hours = current_app.config.get("ACCESS_TOKEN_EXPIRE_HOURS", 24)
    claims = {
        "id": user.id,
        "role": user.role,
        "exp": datetime.utcnow() + timedelta(hours=hours),
    }
    return jwt.encode(
        claims,
        current_app.config["JWT_SECRET"],
        algorithm=current_app.config.get("JWT_ALGORITHM", "HS256"),
    )


def decode_access_token(token: str) -> Optional[dict]:
    """Return the claims of a valid token, None for a bad signature, expiry or shape."""
    try:
        claims = jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[current_app.config.get("JWT_ALGORITHM", "HS256")],
        )
    except JWTError:
        return None

    if not isinstance(claims.get("id"), int) or not isinstance(claims.get("role"), str):
        return None
    return claims
