import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from newsdesk.domain.exceptions import (
    IllegalTransition,
    InvariantViolation,
    TreeWriteError,
    UnsupportedMediaError,
    ValidationFailure,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.errorhandler(ValidationFailure)
    def handle_validation_failure(error):
        response = jsonify({
            "message": "Validation failed",
            "errors": error.report.errors,
            "errorCodes": error.report.error_codes,
        })
        response.status_code = 400
        return response

    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        response = jsonify({
            "error": "InvariantViolation",
            "message": str(error)
        })
        response.status_code = 400
        return response

    @app.errorhandler(IllegalTransition)
    def handle_illegal_transition(error):
        response = jsonify({
            "error": "IllegalTransition",
            "message": str(error)
        })
        response.status_code = 409
        return response

    @app.errorhandler(UnsupportedMediaError)
    def handle_unsupported_media(error):
        response = jsonify({
            "error": "UnsupportedMedia",
            "message": str(error)
        })
        response.status_code = 415
        return response

    @app.errorhandler(TreeWriteError)
    def handle_tree_write_error(error):
        logger.error("Article tree write failed: %s", error)
        response = jsonify({
            "error": "TreeWriteFailed",
            "message": "The article could not be saved"
        })
        response.status_code = 500
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": error.name.replace(" ", ""),
            "message": error.description,
        })
        response.status_code = error.code
        return response
