from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from ..extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    return jsonify(
        {
            "status": "ok",
            "time": datetime.now(timezone.utc).isoformat(),
            "service": "visitor-registry",
        }
    ), 200


@bp.get("/readyz")
def readyz():
    if not current_app.config.get("POSTGRES_CONN_STRING"):
        return jsonify(ready=False, error="database not configured"), 503
    if "sqlalchemy" not in current_app.extensions:
        return jsonify(ready=False, error="database misconfigured"), 503
    try:
        db.session.execute(db.text("SELECT 1"))
        return jsonify(ready=True)
    except Exception as e:
        current_app.logger.warning("Readiness check failed: %s", e)
        return jsonify(ready=False, error="database unavailable"), 503
