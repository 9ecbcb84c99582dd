"""
Staff accounts and bearer tokens.

Tokens are stateless Flask-JWT-Extended access tokens whose identity is the
user id. Every protected route resolves the token back to a live ``User``;
the responses for the failure cases are registered in :func:`init_auth`.
"""

import hmac
import logging

from flask import current_app, jsonify
from flask_jwt_extended import create_access_token

from frontdesk import db
from frontdesk.errors import AuthError, DuplicateError, ForbiddenError, NotFoundError, ValidationError
from frontdesk.models import User
from frontdesk.passwords import check_password, set_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid email or password'


def issue_token(user):
    return create_access_token(identity=str(user.id))


def init_auth(jwt):

    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_data):
        try:
            user_id = int(jwt_data['sub'])
        except (TypeError, ValueError):
            return None
        return db.session.get(User, user_id)

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify(AuthError('No token provided').to_dict()), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        logger.warning('Rejected bearer token: %s', reason)
        return jsonify(AuthError('Invalid or expired token').to_dict()), 401

    @jwt.expired_token_loader
    def expired_token(_jwt_header, _jwt_data):
        return jsonify(AuthError('Invalid or expired token').to_dict()), 401

    @jwt.user_lookup_error_loader
    def unknown_user(_jwt_header, jwt_data):
        logger.warning('Token for missing user %s', jwt_data.get('sub'))
        return jsonify(NotFoundError('User not found').to_dict()), 404


def _registration_key_matches(key):
    expected = current_app.config.get('HOTEL_REGISTRATION_KEY')
    if not expected:
        return False
    return hmac.compare_digest(key.encode('utf-8'), expected.encode('utf-8'))


def register(request):
    if not _registration_key_matches(request.key):
        raise ForbiddenError('Invalid hotel registration key')

    existing = User.query.filter(
        (User.email == request.email) | (User.username == request.username)
    ).first()
    if existing:
        raise DuplicateError('User already exists')

    user = User(username=request.username, email=request.email)
    set_password(user, request.password)
    db.session.add(user)
    db.session.commit()

    logger.info('Registered staff account %s', user.username)
    return user, issue_token(user)


def login(request):
    user = User.query.filter_by(email=request.email).first()
    if not user or not check_password(request.password, user.password):
        logger.warning('Failed login for %s', request.email)
        raise ValidationError(INVALID_CREDENTIALS)
    return user, issue_token(user)
