from flask import Blueprint, jsonify, g

from models import db
from models.user import User
from security.password import hash_password, verify_password
from security.tokens import create_access_token
from services.errors import InvalidInput
from utils.audit import log_event
from utils.auth_context import login_required
from utils.validation import json_body, validate_registration


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def user_json(user: User) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email, "role": user.role}


@auth_bp.post("/register")
def register():
    data = json_body()
    fields, errors = validate_registration(data)
    if errors:
        raise InvalidInput("Validation failed", details=errors)

    if User.query.filter_by(email=fields["email"]).first():
        log_event("REGISTER_FAIL_EMAIL_EXISTS", metadata={"email": fields["email"]})
        return jsonify(error="Email already exists"), 400

    user = User(
        name=fields["name"],
        email=fields["email"],
        password_hash=hash_password(fields["password"]),
        role=fields["role"],
    )
    db.session.add(user)
    db.session.commit()

    log_event("REGISTER_SUCCESS", user_id=user.id, entity="user", entity_id=user.id)
    return jsonify(user=user_json(user)), 201


@auth_bp.post("/login")
def login():
    data = json_body()
    email = data.get("email")
    password = data.get("password")
    if not isinstance(email, str) or not isinstance(password, str) or not email.strip() or not password:
        raise InvalidInput("email and password are required")
    email = email.strip().lower()

    user = User.query.filter_by(email=email).first()
    if not user or not verify_password(password, user.password_hash):
        log_event("LOGIN_FAIL", user_id=user.id if user else None, metadata={"email": email})
        return jsonify(error="Invalid credentials"), 401

    token = create_access_token(user)
    log_event("LOGIN_SUCCESS", user_id=user.id)
    return jsonify(token=token, user=user_json(user)), 200


@auth_bp.get("/me")
@login_required
def me():
    return jsonify(user=user_json(g.user)), 200
