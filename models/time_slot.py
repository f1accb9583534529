from datetime import datetime
from models.db import db
from models.lifecycle import SoftDeleteMixin


class TimeSlot(SoftDeleteMixin, db.Model):
    __tablename__ = "time_slots"

    id = db.Column(db.Integer, primary_key=True)

    workshop_id = db.Column(db.Integer, db.ForeignKey("workshops.id"), nullable=False, index=True)
    start_time = db.Column(db.String(5), nullable=False)  # HH:MM
    end_time = db.Column(db.String(5), nullable=False)

    # live counter, only moved by booking create/cancel and capacity changes
    available_spots = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    workshop = db.relationship("Workshop", back_populates="time_slots")

    __table_args__ = (
        db.CheckConstraint("available_spots >= 0", name="ck_time_slots_available_spots_non_negative"),
    )
