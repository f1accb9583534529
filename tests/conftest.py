# tests/conftest.py
import itertools
from datetime import datetime, timedelta

import pytest

from app import create_app
from models import db
from models.time_slot import TimeSlot
from models.user import User, ROLE_ADMIN, ROLE_CUSTOMER
from models.workshop import Workshop
from security.password import hash_password
from security.tokens import create_access_token

_seq = itertools.count(1)


@pytest.fixture(scope="function")
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "JWT_SECRET": "test-secret",
        "BCRYPT_ROUNDS": 4,
        "LOG_LEVEL": "WARNING",
    })
    with app.app_context():
        db.create_all()
        try:
            yield app
        finally:
            db.session.remove()
            db.drop_all()


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


# ---------- factories ----------
@pytest.fixture
def make_user(app):
    def _make_user(name=None, email=None, role=ROLE_CUSTOMER, password="secret123"):
        n = next(_seq)
        u = User(
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        db.session.add(u)
        db.session.commit()
        return u
    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", role=ROLE_ADMIN)


@pytest.fixture
def customer(make_user):
    return make_user(name="Customer")


@pytest.fixture
def make_workshop(app):
    def _make_workshop(title=None, capacity=5, slots=(("09:00", "10:00"),), days_ahead=30):
        day = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=days_ahead)
        w = Workshop(
            title=title or f"Workshop {next(_seq)}",
            description="A hands-on session for everyone",
            date=day,
            max_capacity=capacity,
        )
        for start, end in slots:
            w.time_slots.append(TimeSlot(start_time=start, end_time=end, available_spots=capacity))
        db.session.add(w)
        db.session.commit()
        return w
    return _make_workshop


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return _auth_headers


@pytest.fixture
def spots(app):
    """Read a slot counter straight from the database."""
    def _spots(slot_id):
        db.session.expire_all()
        return db.session.get(TimeSlot, slot_id).available_spots
    return _spots
