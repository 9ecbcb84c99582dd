"""
Error types raised by the service layer and the handlers that turn them into
JSON responses.
"""

import logging

import pydantic
from flask import jsonify
from werkzeug.exceptions import HTTPException

from frontdesk import db

logger = logging.getLogger(__name__)


class FrontDeskError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = 'INTERNAL_ERROR'

    def __init__(self, message, status_code=None, code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code

    def to_dict(self):
        return {'message': self.message, 'code': self.code}

    def __repr__(self):
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code!r})"


class ValidationError(FrontDeskError):
    status_code = 400
    code = 'VALIDATION_ERROR'


class ConflictError(FrontDeskError):
    status_code = 409
    code = 'CONFLICT'


class DuplicateError(ConflictError):
    code = 'DUPLICATE_ENTRY'


class BookingConflictError(ConflictError):
    """Two stays on the same room overlap. Reported as a 400."""

    status_code = 400
    code = 'BOOKING_CONFLICT'


class NotFoundError(FrontDeskError):
    status_code = 404
    code = 'NOT_FOUND'


class AuthError(FrontDeskError):
    status_code = 401
    code = 'AUTHENTICATION_FAILED'


class ForbiddenError(FrontDeskError):
    status_code = 403
    code = 'FORBIDDEN'


class InvalidOtpError(FrontDeskError):
    status_code = 400
    code = 'INVALID_OTP'

    def __init__(self):
        super().__init__('Invalid or expired OTP')


class InternalError(FrontDeskError):
    pass


def schema_error_message(exc):
    """Collapse a pydantic error into the single message the clients display."""
    errors = exc.errors()
    if any(err['type'] in ('missing', 'string_too_short') for err in errors):
        return 'All fields are required'
    if not errors:
        return 'Invalid request'
    first = errors[0]
    location = '.'.join(str(part) for part in first.get('loc', ()))
    return f"{location}: {first['msg']}" if location else first['msg']


def register_error_handlers(app):

    @app.errorhandler(FrontDeskError)
    def handle_front_desk_error(error):
        if error.status_code >= 500:
            logger.error('%s', repr(error))
        else:
            logger.warning('%s', repr(error))
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(pydantic.ValidationError)
    def handle_schema_error(error):
        body = ValidationError(schema_error_message(error)).to_dict()
        return jsonify(body), 400

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        # Flask's own HTTP errors (unknown route, wrong method)
        if isinstance(error, HTTPException):
            return jsonify({'message': error.description}), error.code

        db.session.rollback()
        logger.exception('Unhandled error while processing request')
        return jsonify({'message': 'Internal server error', 'code': InternalError.code}), 500
