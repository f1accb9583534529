"""Booking lifecycle: creation, cancellation, status changes and reporting.

``TimeSlot.available_spots`` is the only shared mutable counter. It is never
read-then-written from Python; every change is a single guarded UPDATE
inside the request transaction, so two requests racing for the last spot
are serialised by the database and at most one of them affects a row.
"""
import math
from datetime import datetime

from flask import current_app
from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError

from models import db
from models.booking import Booking, CANCELLED, CANCELLABLE_STATUSES, BOOKING_STATUSES
from models.lifecycle import ACTIVE, DELETED
from models.time_slot import TimeSlot
from models.workshop import Workshop
from services.errors import Conflict, InvalidInput, InvalidState, NotFound
from utils.validation import parse_positive_int


def _require_id(value, label: str) -> int:
    parsed = parse_positive_int(value)
    if parsed is None:
        raise InvalidInput(f"Invalid {label} ID")
    return parsed


def _claim_spot(workshop_id: int, time_slot_id: int) -> bool:
    """Take one spot from an active slot of the workshop. False if none left."""
    claimed = (
        TimeSlot.query
        .filter(
            TimeSlot.id == time_slot_id,
            TimeSlot.workshop_id == workshop_id,
            TimeSlot.lifecycle == ACTIVE,
            TimeSlot.available_spots > 0,
        )
        .update(
            {TimeSlot.available_spots: TimeSlot.available_spots - 1},
            synchronize_session=False,
        )
    )
    return claimed == 1


def _release_spot(time_slot_id: int):
    (
        TimeSlot.query
        .filter(TimeSlot.id == time_slot_id)
        .update(
            {TimeSlot.available_spots: TimeSlot.available_spots + 1},
            synchronize_session=False,
        )
    )


def create_booking(customer_id: int, workshop_id, time_slot_id) -> Booking:
    workshop_id = _require_id(workshop_id, "workshop")
    time_slot_id = _require_id(time_slot_id, "time slot")

    existing = Booking.active().filter_by(customer_id=customer_id, workshop_id=workshop_id).first()
    if existing:
        raise Conflict("You have already booked this workshop.")

    workshop = Workshop.active().filter_by(id=workshop_id).first()
    if not workshop or not _claim_spot(workshop_id, time_slot_id):
        db.session.rollback()
        raise InvalidState("Time slot not available")

    booking = Booking(
        customer_id=customer_id,
        workshop_id=workshop_id,
        time_slot_id=time_slot_id,
    )
    db.session.add(booking)

    try:
        db.session.flush()
    except IntegrityError:
        # A concurrent request booked the same workshop first; the claimed spot goes back too
        db.session.rollback()
        raise Conflict("You have already booked this workshop.")

    db.session.commit()
    current_app.logger.info(
        "Booking %s created: customer=%s workshop=%s slot=%s",
        booking.id, customer_id, workshop_id, time_slot_id,
    )
    return booking


def cancel_booking(booking_id) -> Booking:
    """Cancel an active booking and give its spot back.

    Authorisation is the caller's job; ownership is not checked here.
    """
    booking_id = _require_id(booking_id, "booking")

    booking = (
        Booking.active()
        .filter(Booking.id == booking_id, Booking.status.in_(CANCELLABLE_STATUSES))
        .first()
    )
    if not booking:
        raise NotFound("Booking not found or cannot be cancelled")

    time_slot_id = booking.time_slot_id
    now = datetime.utcnow()
    transitioned = (
        Booking.query
        .filter(
            Booking.id == booking_id,
            Booking.lifecycle == ACTIVE,
            Booking.status.in_(CANCELLABLE_STATUSES),
        )
        .update(
            {
                Booking.status: CANCELLED,
                Booking.lifecycle: DELETED,
                Booking.cancelled_at: now,
                Booking.updated_at: now,
            },
            synchronize_session=False,
        )
    )
    if transitioned != 1:
        # lost a race with another cancellation
        db.session.rollback()
        raise NotFound("Booking not found or cannot be cancelled")

    _release_spot(time_slot_id)
    db.session.commit()

    current_app.logger.info("Booking %s cancelled, slot %s released", booking_id, time_slot_id)
    return booking


def get_user_bookings(customer_id: int):
    return (
        Booking.active()
        .filter_by(customer_id=customer_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )


def get_booking_by_id(booking_id, customer_id: int) -> Booking:
    booking_id = _require_id(booking_id, "booking")
    booking = Booking.active().filter_by(id=booking_id, customer_id=customer_id).first()
    if not booking:
        raise NotFound("Booking not found")
    return booking


def update_booking_status(booking_id, new_status: str) -> Booking:
    """Admin status overwrite.

    CANCELLED takes the same path as ``cancel_booking`` so the spot is
    released exactly once. PENDING <-> CONFIRMED leaves the counter alone.
    """
    if new_status not in BOOKING_STATUSES:
        raise InvalidInput("Invalid status")
    booking_id = _require_id(booking_id, "booking")

    booking = Booking.active().filter_by(id=booking_id).first()
    if not booking:
        raise NotFound("Booking not found or has been deleted")

    if new_status == CANCELLED:
        return cancel_booking(booking_id)

    previous = booking.status
    changed = (
        Booking.query
        .filter(
            Booking.id == booking_id,
            Booking.lifecycle == ACTIVE,
            Booking.status.in_(CANCELLABLE_STATUSES),
        )
        .update(
            {Booking.status: new_status, Booking.updated_at: datetime.utcnow()},
            synchronize_session=False,
        )
    )
    if changed != 1:
        # cancelled since it was read
        db.session.rollback()
        raise NotFound("Booking not found or has been deleted")

    db.session.commit()

    current_app.logger.info("Booking %s status %s -> %s", booking_id, previous, new_status)
    return booking


def _page_args(page, limit):
    default_limit = current_app.config.get("DEFAULT_PAGE_SIZE", 10)
    max_limit = current_app.config.get("MAX_PAGE_SIZE", 100)

    page = parse_positive_int(page) or 1
    limit = parse_positive_int(limit) or default_limit
    return page, min(limit, max_limit)


def get_all_bookings(page=None, limit=None) -> dict:
    page, limit = _page_args(page, limit)

    q = Booking.active()
    total = q.count()
    rows = (
        q.order_by(Booking.created_at.desc(), Booking.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "data": rows,
        "meta": {
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit),
        },
    }


def get_dashboard_stats() -> dict:
    total_bookings = Booking.active().count()
    total_workshops = Workshop.active().count()

    booking_count = func.count(Booking.id)
    popular = (
        db.session.query(Workshop.title, booking_count.label("bookings"))
        .outerjoin(
            Booking,
            and_(Booking.workshop_id == Workshop.id, Booking.lifecycle == ACTIVE),
        )
        .filter(Workshop.lifecycle == ACTIVE)
        .group_by(Workshop.id, Workshop.title)
        .order_by(booking_count.desc(), Workshop.id.asc())
        .first()
    )

    return {
        "totalBookings": total_bookings,
        "totalWorkshops": total_workshops,
        "popularWorkshop": {
            "title": popular.title if popular else None,
            "bookings": popular.bookings if popular else 0,
        },
    }
