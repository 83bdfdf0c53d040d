import logging

from flask import jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from newsdesk.extensions import db
from . import v1_bp

logger = logging.getLogger(__name__)

@v1_bp.route('/health', methods=['GET'])
def health_check():
    try:
        db.session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.warning("Health check could not reach the database: %s", exc)
        database = "unavailable"

    return jsonify({
        "status": "ok" if database == "ok" else "degraded",
        "service": "newsdesk",
        "database": database,
    }), 200 if database == "ok" else 503
