from models.db import db

ACTIVE = "ACTIVE"
DELETED = "DELETED"


class SoftDeleteMixin:
    """Soft delete as a lifecycle tag shared by workshops, slots and bookings."""

    lifecycle = db.Column(db.String(10), nullable=False, default=ACTIVE, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.lifecycle == DELETED

    def mark_deleted(self):
        self.lifecycle = DELETED

    @classmethod
    def active(cls):
        return cls.query.filter(cls.lifecycle == ACTIVE)
