from flask import jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from tenantcms.extensions import db
from . import v1_bp

SERVICE_NAME = "tenantcms"


@v1_bp.route("/health", methods=["GET"])
def health_check():
    return jsonify({"status": "ok", "service": SERVICE_NAME}), 200


@v1_bp.route("/health/ready", methods=["GET"])
def readiness_check():
    """Liveness plus a round trip to the database."""
    try:
        db.session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError:
        db.session.rollback()
        database = "unavailable"

    healthy = database == "ok"
    return jsonify({
        "status": "ok" if healthy else "degraded",
        "service": SERVICE_NAME,
        "checks": {"database": database},
    }), 200 if healthy else 503
