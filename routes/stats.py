from flask import Blueprint, jsonify

from security.rbac import require_roles
from services.bookings import get_dashboard_stats

stats_bp = Blueprint("stats", __name__, url_prefix="/api/stats")


@stats_bp.get("/stats")
@require_roles("ADMIN")
def dashboard_stats():
    return jsonify(get_dashboard_stats()), 200
