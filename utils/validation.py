import re
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from flask import current_app, request

from models.booking import BOOKING_STATUSES
from models.user import ROLES, ROLE_CUSTOMER
from services.errors import InvalidInput

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_TIME = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")

_DEFAULTS = {
    "PASSWORD_MIN_LEN": 6,
    "MAX_WORKSHOP_CAPACITY": 100,
    "MAX_TIME_SLOTS": 10,
}


def _cfg(name: str):
    try:
        return current_app.config.get(name, _DEFAULTS[name])
    except RuntimeError:
        # outside an app context (CLI helpers, plain unit tests)
        return _DEFAULTS[name]


def _error(field: str, message: str) -> dict:
    return {"field": field, "message": message}


def json_body() -> dict:
    """Request JSON as a dict; an absent or unparseable body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object")
    return data


def parse_positive_int(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdecimal():
        parsed = int(value.strip())
        return parsed if parsed > 0 else None
    return None


def normalize_time(value) -> Optional[str]:
    """Return ``HH:MM`` for a valid 24h time string, else None."""
    if not isinstance(value, str):
        return None
    m = _TIME.match(value.strip())
    if not m:
        return None
    return f"{int(m.group(1)):02d}:{m.group(2)}"


def parse_date(value) -> Optional[datetime]:
    # Accepts "2030-01-20" or full ISO datetimes, "Z" included; stored as naive UTC
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def is_future_date(dt: datetime) -> bool:
    return dt > datetime.utcnow()


def validate_registration(data: dict) -> Tuple[dict, List[dict]]:
    errors: List[dict] = []

    name = data.get("name")
    name = name.strip() if isinstance(name, str) else ""
    if len(name) < 2:
        errors.append(_error("name", "Name must be at least 2 characters"))

    email = data.get("email")
    email = email.strip().lower() if isinstance(email, str) else ""
    if not _EMAIL.match(email) or len(email) > 255:
        errors.append(_error("email", "Invalid email address"))

    password = data.get("password")
    min_len = int(_cfg("PASSWORD_MIN_LEN"))
    if not isinstance(password, str) or len(password) < min_len:
        errors.append(_error("password", f"Password must be at least {min_len} characters"))

    role = data.get("role") or ROLE_CUSTOMER
    if role not in ROLES:
        errors.append(_error("role", "Role must be ADMIN or CUSTOMER"))

    return {"name": name, "email": email, "password": password, "role": role}, errors


def _validate_time_slots(value) -> Tuple[list, List[dict]]:
    errors: List[dict] = []
    max_slots = int(_cfg("MAX_TIME_SLOTS"))

    if not isinstance(value, list):
        return [], [_error("timeSlots", "timeSlots must be an array")]
    if len(value) < 1:
        errors.append(_error("timeSlots", "At least one time slot is required"))
    if len(value) > max_slots:
        errors.append(_error("timeSlots", f"Maximum {max_slots} time slots per workshop"))

    slots = []
    for i, raw in enumerate(value):
        if not isinstance(raw, dict):
            errors.append(_error(f"timeSlots.{i}", "Time slot must be an object"))
            continue
        start = normalize_time(raw.get("startTime"))
        end = normalize_time(raw.get("endTime"))
        if start is None:
            errors.append(_error(f"timeSlots.{i}.startTime", "Invalid time format (HH:MM)"))
        if end is None:
            errors.append(_error(f"timeSlots.{i}.endTime", "Invalid time format (HH:MM)"))
        if start and end:
            # zero-padded HH:MM compares correctly as text
            if start >= end:
                errors.append(_error(f"timeSlots.{i}", "End time must be after start time"))
            else:
                slots.append({"start_time": start, "end_time": end})
    return slots, errors


def validate_workshop(data: dict, partial: bool = False) -> Tuple[dict, List[dict]]:
    """Check workshop fields. With ``partial`` only the supplied fields are checked."""
    errors: List[dict] = []
    cleaned = {}

    if not partial or "title" in data:
        title = data.get("title")
        title = title.strip() if isinstance(title, str) else ""
        if len(title) < 3:
            errors.append(_error("title", "Title must be at least 3 characters"))
        cleaned["title"] = title

    if not partial or "description" in data:
        description = data.get("description")
        description = description.strip() if isinstance(description, str) else ""
        if len(description) < 10:
            errors.append(_error("description", "Description must be at least 10 characters"))
        cleaned["description"] = description

    if not partial or "date" in data:
        date = parse_date(data.get("date"))
        if date is None:
            errors.append(_error("date", "Invalid date format"))
        elif not is_future_date(date):
            errors.append(_error("date", "Date must be in the future"))
        cleaned["date"] = date

    if not partial or "maxCapacity" in data:
        capacity = data.get("maxCapacity")
        max_capacity = int(_cfg("MAX_WORKSHOP_CAPACITY"))
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            errors.append(_error("maxCapacity", "Capacity must be an integer"))
        elif capacity <= 0:
            errors.append(_error("maxCapacity", "Capacity must be positive"))
        elif capacity > max_capacity:
            errors.append(_error("maxCapacity", f"Capacity cannot exceed {max_capacity}"))
        cleaned["max_capacity"] = capacity

    if not partial:
        slots, slot_errors = _validate_time_slots(data.get("timeSlots"))
        errors.extend(slot_errors)
        cleaned["time_slots"] = slots

    return cleaned, errors


def validate_booking(data: dict) -> Tuple[dict, List[dict]]:
    errors: List[dict] = []
    workshop_id = parse_positive_int(data.get("workshopId"))
    time_slot_id = parse_positive_int(data.get("timeSlotId"))
    if workshop_id is None:
        errors.append(_error("workshopId", "Invalid workshop ID"))
    if time_slot_id is None:
        errors.append(_error("timeSlotId", "Invalid time slot ID"))
    return {"workshop_id": workshop_id, "time_slot_id": time_slot_id}, errors


def validate_booking_status(data: dict) -> Tuple[Optional[str], List[dict]]:
    status = data.get("status")
    if status not in BOOKING_STATUSES:
        return None, [_error("status", "Status must be PENDING, CONFIRMED, or CANCELLED")]
    return status, []
