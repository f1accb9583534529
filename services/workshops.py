from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import db
from models.lifecycle import ACTIVE
from models.time_slot import TimeSlot
from models.workshop import Workshop
from services.errors import Conflict, Gone, InvalidInput, NotFound
from utils.validation import parse_positive_int


def _require_workshop_id(value) -> int:
    workshop_id = parse_positive_int(value)
    if workshop_id is None:
        raise InvalidInput("Invalid workshop ID format")
    return workshop_id


def _find_duplicate(title: str, date, exclude_id=None):
    q = Workshop.active().filter(Workshop.title == title, Workshop.date == date)
    if exclude_id is not None:
        q = q.filter(Workshop.id != exclude_id)
    return q.first()


def list_workshops():
    return Workshop.active().order_by(Workshop.date.asc(), Workshop.id.asc()).all()


def get_workshop(workshop_id) -> Workshop:
    workshop_id = _require_workshop_id(workshop_id)
    workshop = Workshop.active().filter_by(id=workshop_id).first()
    if not workshop:
        raise NotFound(f"Workshop with ID {workshop_id} not found")
    return workshop


def create_workshop(title: str, description: str, date, max_capacity: int, time_slots) -> Workshop:
    if _find_duplicate(title, date):
        raise Conflict(
            "Workshop already exists",
            details=[{"field": "title", "message": f'A workshop with title "{title}" on {date.isoformat()} already exists'}],
        )

    workshop = Workshop(
        title=title,
        description=description,
        date=date,
        max_capacity=max_capacity,
    )
    for slot in time_slots:
        workshop.time_slots.append(
            TimeSlot(
                start_time=slot["start_time"],
                end_time=slot["end_time"],
                available_spots=max_capacity,
            )
        )
    db.session.add(workshop)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Workshop already exists")

    current_app.logger.info("Workshop %s created with %d slot(s)", workshop.id, len(time_slots))
    return workshop


def update_workshop(workshop_id, fields: dict) -> Workshop:
    """Partial update of title, description, date and max_capacity.

    A capacity change moves every active slot's counter by the same delta;
    it is refused if any slot already holds more bookings than the new capacity.
    """
    workshop = get_workshop(workshop_id)

    title = fields.get("title", workshop.title)
    date = fields.get("date", workshop.date)
    if ("title" in fields or "date" in fields) and _find_duplicate(title, date, exclude_id=workshop.id):
        raise Conflict("Workshop already exists")

    if "max_capacity" in fields:
        delta = fields["max_capacity"] - workshop.max_capacity
        if delta:
            slots = TimeSlot.query.filter_by(workshop_id=workshop.id, lifecycle=ACTIVE)
            expected = slots.count()
            moved = (
                slots
                .filter(TimeSlot.available_spots + delta >= 0)
                .update(
                    {TimeSlot.available_spots: TimeSlot.available_spots + delta},
                    synchronize_session=False,
                )
            )
            if moved != expected:
                db.session.rollback()
                raise InvalidInput("maxCapacity is lower than the bookings already made for a time slot")

    for key in ("title", "description", "date", "max_capacity"):
        if key in fields:
            setattr(workshop, key, fields[key])

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Workshop already exists")

    current_app.logger.info("Workshop %s updated: %s", workshop.id, sorted(fields))
    return workshop


def delete_workshop(workshop_id) -> Workshop:
    workshop_id = _require_workshop_id(workshop_id)
    workshop = db.session.get(Workshop, workshop_id)
    if not workshop:
        raise NotFound(f"Workshop with ID {workshop_id} not found")
    if workshop.is_deleted:
        raise Gone("Workshop is already deleted")

    workshop.mark_deleted()
    db.session.commit()

    current_app.logger.info("Workshop %s deleted", workshop_id)
    return workshop
