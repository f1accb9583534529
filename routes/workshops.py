from flask import Blueprint, jsonify

from models.workshop import Workshop
from security.rbac import require_roles
from services import workshops as workshop_service
from services.errors import InvalidInput
from utils.audit import log_event
from utils.validation import json_body, validate_workshop

workshops_bp = Blueprint("workshops", __name__, url_prefix="/api/workshops")


def workshop_json(w: Workshop) -> dict:
    return {
        "id": w.id,
        "title": w.title,
        "description": w.description,
        "date": w.date.isoformat(),
        "maxCapacity": w.max_capacity,
        "isDeleted": w.is_deleted,
        "createdAt": w.created_at.isoformat(),
        "timeSlots": [
            {
                "id": s.id,
                "startTime": s.start_time,
                "endTime": s.end_time,
                "availableSpots": s.available_spots,
            }
            for s in w.active_time_slots
        ],
    }


# ---------- PUBLIC: browse workshops ----------
@workshops_bp.get("")
def list_workshops():
    return jsonify([workshop_json(w) for w in workshop_service.list_workshops()]), 200


@workshops_bp.get("/<workshop_id>")
def get_workshop(workshop_id):
    return jsonify(workshop_json(workshop_service.get_workshop(workshop_id))), 200


# ---------- ADMIN: manage workshops ----------
@workshops_bp.post("")
@require_roles("ADMIN")
def create_workshop():
    data = json_body()
    fields, errors = validate_workshop(data)
    if errors:
        raise InvalidInput("Workshop validation failed", details=errors)

    workshop = workshop_service.create_workshop(**fields)
    log_event("WORKSHOP_CREATE", entity="workshop", entity_id=workshop.id)
    return jsonify(workshop_json(workshop)), 201


@workshops_bp.put("/<workshop_id>")
@require_roles("ADMIN")
def update_workshop(workshop_id):
    data = json_body()
    fields, errors = validate_workshop(data, partial=True)
    if errors:
        raise InvalidInput("Workshop validation failed", details=errors)

    workshop = workshop_service.update_workshop(workshop_id, fields)
    log_event("WORKSHOP_UPDATE", entity="workshop", entity_id=workshop.id, metadata={"fields": sorted(fields)})
    return jsonify(workshop_json(workshop)), 200


@workshops_bp.delete("/<workshop_id>")
@require_roles("ADMIN")
def delete_workshop(workshop_id):
    workshop = workshop_service.delete_workshop(workshop_id)
    log_event("WORKSHOP_DELETE", entity="workshop", entity_id=workshop.id)
    return jsonify(message="Workshop deleted successfully"), 200
