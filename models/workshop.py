from datetime import datetime
from models.db import db
from models.lifecycle import SoftDeleteMixin, ACTIVE


class Workshop(SoftDeleteMixin, db.Model):
    __tablename__ = "workshops"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    date = db.Column(db.DateTime, nullable=False, index=True)
    max_capacity = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    time_slots = db.relationship(
        "TimeSlot",
        back_populates="workshop",
        order_by="TimeSlot.id",
        lazy=True,
    )
    bookings = db.relationship("Booking", back_populates="workshop", lazy=True)

    __table_args__ = (
        db.CheckConstraint("max_capacity > 0", name="ck_workshops_max_capacity_positive"),
        # Only one live workshop per (title, date); deleted ones may repeat
        db.Index(
            "uq_workshops_active_title_date",
            "title",
            "date",
            unique=True,
            sqlite_where=db.text("lifecycle = 'ACTIVE'"),
            postgresql_where=db.text("lifecycle = 'ACTIVE'"),
        ),
    )

    @property
    def active_time_slots(self):
        return [s for s in self.time_slots if s.lifecycle == ACTIVE]
