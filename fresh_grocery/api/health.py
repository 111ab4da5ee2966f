"""Health check endpoints for Kubernetes probes."""

import logging
from typing import Any

from flask import Blueprint, jsonify

from fresh_grocery import database

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")


@health_bp.route("/healthz", methods=["GET"])
def healthz() -> Any:
    """Liveness probe. Answers as long as the process can serve requests."""
    return jsonify({"status": "alive", "ready": True}), 200


@health_bp.route("/readyz", methods=["GET"])
def readyz() -> Any:
    """Readiness probe: the database is reachable and fully migrated."""
    # Looked up through the module so tests can patch them
    connected = database.check_db_connection()
    if not connected:
        logger.warning("Readiness check failed: database unreachable")
        return jsonify({
            "status": "database not ready",
            "ready": False,
            "database": {"connected": False, "ok": False},
        }), 503

    pending = database.get_pending_migrations()
    db_check = {
        "connected": True,
        "migrations_pending": len(pending),
        "ok": not pending,
    }
    if pending:
        return jsonify({"status": "migrations pending", "ready": False, "database": db_check}), 503

    return jsonify({"status": "ready", "ready": True, "database": db_check}), 200
