from .health import health_bp
from .auth import auth_bp
from .workshops import workshops_bp
from .bookings import bookings_bp
from .stats import stats_bp
