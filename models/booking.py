from datetime import datetime
from models.db import db
from models.lifecycle import SoftDeleteMixin

PENDING = "PENDING"
CONFIRMED = "CONFIRMED"
CANCELLED = "CANCELLED"
BOOKING_STATUSES = (PENDING, CONFIRMED, CANCELLED)
CANCELLABLE_STATUSES = (PENDING, CONFIRMED)


class Booking(SoftDeleteMixin, db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    customer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    workshop_id = db.Column(db.Integer, db.ForeignKey("workshops.id"), nullable=False, index=True)
    time_slot_id = db.Column(db.Integer, db.ForeignKey("time_slots.id"), nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default=PENDING)
    # status values: PENDING, CONFIRMED, CANCELLED

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    cancelled_at = db.Column(db.DateTime, nullable=True)

    customer = db.relationship("User", back_populates="bookings")
    workshop = db.relationship("Workshop", back_populates="bookings")
    time_slot = db.relationship("TimeSlot")

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'CANCELLED')", name="ck_bookings_status"
        ),
        # Hard business-rule: one live booking per customer per workshop
        db.Index(
            "uq_bookings_active_customer_workshop",
            "customer_id",
            "workshop_id",
            unique=True,
            sqlite_where=db.text("lifecycle = 'ACTIVE'"),
            postgresql_where=db.text("lifecycle = 'ACTIVE'"),
        ),
    )
