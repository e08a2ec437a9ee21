"""Error types raised by the domain services and their JSON rendering.

Services raise one of the ``ApiError`` subclasses; ``register_error_handlers``
turns them (and any stray exception) into ``{"message": ...}`` responses.
"""
from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException

from lobbyhub import db


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'message': self.message}


class ValidationError(ApiError):
    status_code = 400


class StateConflict(ApiError):
    """The action is not valid for the entity's current state."""
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class PermissionDenied(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


def register_error_handlers(flask_app):
    @flask_app.errorhandler(ApiError)
    def handle_api_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        return jsonify({'message': exc.description}), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected(exc):
        db.session.rollback()
        current_app.logger.exception(f"[api-error] {exc}")
        payload = {'message': 'Internal Server Error'}
        if current_app.debug:
            payload['error'] = str(exc)
        return jsonify(payload), 500
