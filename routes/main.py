"""
Main Routes Blueprint

Handles the service index and health check.
"""

from flask import Blueprint, jsonify, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from extensions import db

main_bp = Blueprint('main', __name__)


@main_bp.route("/")
def home():
    """Service index pointing at the admin API."""
    return jsonify({
        "service": "newsroom",
        "admin": "/admin/news",
        "api": "/admin/news/api",
    })


@main_bp.route("/health")
def health():
    """Liveness plus a trivial database round trip."""
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("Health check database query failed")
        return jsonify(status="degraded", database="unavailable"), 503
    return jsonify(status="ok", database="ok")
