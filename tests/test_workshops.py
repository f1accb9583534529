from datetime import datetime, timedelta

import pytest

from models.audit_log import AuditLog
from services import bookings as booking_svc


def _future(days=30):
    return (datetime.utcnow() + timedelta(days=days)).date().isoformat()


def _payload(**overrides):
    body = {
        "title": "Intro to Python",
        "description": "Variables, loops and functions for beginners",
        "date": _future(),
        "maxCapacity": 20,
        "timeSlots": [
            {"startTime": "9:00", "endTime": "10:30"},
            {"startTime": "14:00", "endTime": "15:00"},
        ],
    }
    body.update(overrides)
    return body


def test_admin_creates_workshop_with_full_slots(client, admin, auth_headers):
    r = client.post("/api/workshops", json=_payload(), headers=auth_headers(admin))

    assert r.status_code == 201
    w = r.get_json()
    assert w["maxCapacity"] == 20
    assert w["isDeleted"] is False
    assert [(s["startTime"], s["availableSpots"]) for s in w["timeSlots"]] == [("09:00", 20), ("14:00", 20)]
    assert AuditLog.query.filter_by(action="WORKSHOP_CREATE").count() == 1


def test_duplicate_title_and_date_conflicts(client, admin, auth_headers):
    headers = auth_headers(admin)
    client.post("/api/workshops", json=_payload(), headers=headers)
    r = client.post("/api/workshops", json=_payload(), headers=headers)

    assert r.status_code == 409


def test_same_title_on_other_day_is_fine(client, admin, auth_headers):
    headers = auth_headers(admin)
    client.post("/api/workshops", json=_payload(), headers=headers)
    r = client.post("/api/workshops", json=_payload(date=_future(31)), headers=headers)

    assert r.status_code == 201


@pytest.mark.parametrize("field,value", [
    ("title", "ab"),
    ("description", "short"),
    ("date", "2001-01-01"),
    ("date", "not a date"),
    ("maxCapacity", 0),
    ("maxCapacity", 101),
    ("maxCapacity", "20"),
    ("timeSlots", []),
    ("timeSlots", [{"startTime": "10:00", "endTime": "09:00"}]),
    ("timeSlots", [{"startTime": "25:00", "endTime": "26:00"}]),
])
def test_create_validation(client, admin, auth_headers, field, value):
    r = client.post("/api/workshops", json=_payload(**{field: value}), headers=auth_headers(admin))

    assert r.status_code == 400
    assert r.get_json()["error"] == "Workshop validation failed"
    assert any(d["field"].startswith(field) for d in r.get_json()["details"])


def test_customer_cannot_create(client, customer, auth_headers):
    r = client.post("/api/workshops", json=_payload(), headers=auth_headers(customer))
    assert r.status_code == 403


def test_anonymous_cannot_create(client):
    r = client.post("/api/workshops", json=_payload())
    assert r.status_code == 401


def test_list_is_public_ordered_by_date_and_hides_deleted(client, make_workshop, admin, auth_headers):
    later = make_workshop(title="Later", days_ahead=40)
    sooner = make_workshop(title="Sooner", days_ahead=10)
    gone = make_workshop(title="Gone", days_ahead=20)
    client.delete(f"/api/workshops/{gone.id}", headers=auth_headers(admin))

    r = client.get("/api/workshops")

    assert r.status_code == 200
    assert [w["id"] for w in r.get_json()] == [sooner.id, later.id]


def test_get_by_id(client, make_workshop):
    w = make_workshop(title="Intro")

    r = client.get(f"/api/workshops/{w.id}")
    assert r.status_code == 200
    assert r.get_json()["title"] == "Intro"

    assert client.get("/api/workshops/abc").status_code == 400
    assert client.get("/api/workshops/9999").status_code == 404


def test_update_partial_fields(client, make_workshop, admin, auth_headers):
    w = make_workshop(title="Old title")

    r = client.put(f"/api/workshops/{w.id}", json={"title": "New title"}, headers=auth_headers(admin))

    assert r.status_code == 200
    body = r.get_json()
    assert body["title"] == "New title"
    assert body["description"] == "A hands-on session for everyone"


def test_update_capacity_moves_slot_counters(client, make_workshop, customer, admin, auth_headers):
    w = make_workshop(capacity=5)
    booking_svc.create_booking(customer.id, w.id, w.time_slots[0].id)

    r = client.put(f"/api/workshops/{w.id}", json={"maxCapacity": 8}, headers=auth_headers(admin))

    assert r.status_code == 200
    assert r.get_json()["maxCapacity"] == 8
    assert r.get_json()["timeSlots"][0]["availableSpots"] == 7


def test_update_capacity_below_bookings_is_rejected(client, make_workshop, make_user, admin, auth_headers, spots):
    w = make_workshop(capacity=3)
    slot_id = w.time_slots[0].id
    for _ in range(3):
        booking_svc.create_booking(make_user().id, w.id, slot_id)

    r = client.put(f"/api/workshops/{w.id}", json={"maxCapacity": 2}, headers=auth_headers(admin))

    assert r.status_code == 400
    assert spots(slot_id) == 0
    assert client.get(f"/api/workshops/{w.id}").get_json()["maxCapacity"] == 3


def test_update_into_existing_title_and_date_conflicts(client, make_workshop, admin, auth_headers):
    a = make_workshop(title="Alpha")
    b = make_workshop(title="Beta")
    assert a.date == b.date

    r = client.put(f"/api/workshops/{b.id}", json={"title": "Alpha"}, headers=auth_headers(admin))
    assert r.status_code == 409


def test_update_missing_or_invalid(client, make_workshop, admin, auth_headers):
    headers = auth_headers(admin)
    w = make_workshop()

    assert client.put("/api/workshops/9999", json={"title": "Whatever"}, headers=headers).status_code == 404
    assert client.put(f"/api/workshops/{w.id}", json={"maxCapacity": -1}, headers=headers).status_code == 400


def test_delete_is_soft_and_rejects_repeat(client, make_workshop, admin, auth_headers):
    headers = auth_headers(admin)
    w = make_workshop()

    r = client.delete(f"/api/workshops/{w.id}", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["message"] == "Workshop deleted successfully"

    assert client.delete(f"/api/workshops/{w.id}", headers=headers).status_code == 410
    assert client.get(f"/api/workshops/{w.id}").status_code == 404
    assert client.delete("/api/workshops/9999", headers=headers).status_code == 404
