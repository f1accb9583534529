from flask import Blueprint, request, jsonify, g

from models.booking import Booking
from security.rbac import require_roles
from services import bookings as booking_service
from services.errors import Conflict, InvalidInput, InvalidState
from utils.audit import log_event
from utils.auth_context import login_required
from utils.validation import json_body, validate_booking, validate_booking_status

bookings_bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


def booking_json(b: Booking, with_customer=False, with_description=False) -> dict:
    workshop = {"title": b.workshop.title, "date": b.workshop.date.isoformat()}
    if with_description:
        workshop["description"] = b.workshop.description

    out = {
        "id": b.id,
        "customerId": b.customer_id,
        "workshopId": b.workshop_id,
        "timeSlotId": b.time_slot_id,
        "status": b.status,
        "isDeleted": b.is_deleted,
        "createdAt": b.created_at.isoformat(),
        "workshop": workshop,
        "timeSlot": {"startTime": b.time_slot.start_time, "endTime": b.time_slot.end_time},
    }
    if with_customer:
        out["customer"] = {"name": b.customer.name, "email": b.customer.email}
    return out


# ---------- CUSTOMERS: book a slot ----------
@bookings_bp.post("")
@login_required
def create_booking():
    data = json_body()
    fields, errors = validate_booking(data)
    if errors:
        raise InvalidInput("Booking validation failed", details=errors)

    try:
        booking = booking_service.create_booking(g.user.id, fields["workshop_id"], fields["time_slot_id"])
    except Conflict:
        log_event("BOOKING_FAIL_DUPLICATE", entity="workshop", entity_id=fields["workshop_id"])
        raise
    except InvalidState:
        log_event("BOOKING_FAIL_UNAVAILABLE", entity="time_slot", entity_id=fields["time_slot_id"])
        raise

    log_event(
        "BOOKING_CREATE",
        entity="booking",
        entity_id=booking.id,
        metadata={"workshop_id": booking.workshop_id, "time_slot_id": booking.time_slot_id},
    )
    return jsonify(message="Booking created successfully", booking=booking_json(booking, with_customer=True)), 201


@bookings_bp.get("/my")
@login_required
def my_bookings():
    rows = booking_service.get_user_bookings(g.user.id)
    return jsonify([booking_json(b) for b in rows]), 200


@bookings_bp.get("/<booking_id>")
@login_required
def get_booking(booking_id):
    booking = booking_service.get_booking_by_id(booking_id, g.user.id)
    return jsonify(booking_json(booking, with_description=True)), 200


# ---------- ADMIN: cancel, list, change status ----------
@bookings_bp.patch("/<booking_id>/cancel")
@require_roles("ADMIN")
def cancel_booking(booking_id):
    booking = booking_service.cancel_booking(booking_id)
    log_event("BOOKING_CANCEL", entity="booking", entity_id=booking.id, metadata={"time_slot_id": booking.time_slot_id})
    return jsonify(message="Booking cancelled successfully"), 200


@bookings_bp.get("")
@require_roles("ADMIN")
def list_all_bookings():
    result = booking_service.get_all_bookings(request.args.get("page"), request.args.get("limit"))
    return jsonify(
        data=[booking_json(b, with_customer=True) for b in result["data"]],
        meta=result["meta"],
    ), 200


@bookings_bp.patch("/<booking_id>/update")
@require_roles("ADMIN")
def update_booking_status(booking_id):
    data = json_body()
    status, errors = validate_booking_status(data)
    if errors:
        raise InvalidInput("Invalid status", details=errors)

    booking = booking_service.update_booking_status(booking_id, status)
    log_event("BOOKING_STATUS_UPDATE", entity="booking", entity_id=booking.id, metadata={"status": status})
    return jsonify(booking_json(booking, with_customer=True)), 200
