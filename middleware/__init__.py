from flask import jsonify
from werkzeug.exceptions import HTTPException
import pydantic
import logging

from extensions import db
from utils.errors import APIError
from utils.monitoring import request_logger_middleware, error_tracker

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """Map domain errors to JSON responses; anything unexpected becomes a generic 500"""

    @app.errorhandler(APIError)
    def handle_api_error(error):
        if error.status_code >= 500:
            db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(pydantic.ValidationError)
    def handle_validation_error(error):
        details = [
            {
                'field': '.'.join(str(part) for part in e['loc']),
                'message': e['msg'],
            }
            for e in error.errors()
        ]
        return jsonify({'error': 'Validation error', 'details': details}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.exception(f"Unhandled error: {error}")
        error_tracker.log_error(error)
        return jsonify({'error': 'Internal server error'}), 500


def request_logger(app):
    request_logger_middleware(app)
