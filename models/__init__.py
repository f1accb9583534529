from .db import db
from .lifecycle import ACTIVE, DELETED
from .user import User
from .workshop import Workshop
from .time_slot import TimeSlot
from .booking import Booking
from .audit_log import AuditLog
