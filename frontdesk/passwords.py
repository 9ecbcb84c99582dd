"""
Password hashing and the emailed one-time code used to reset a forgotten
password.

A reset request stores only the SHA-256 digest of the code and its expiry on
the user row. Consuming the code clears both, so a code works once.
"""

import hashlib
import logging
import secrets
from datetime import timedelta

import bcrypt
from flask import current_app

from frontdesk import db, timewindow
from frontdesk.errors import InternalError, InvalidOtpError, NotFoundError, ValidationError
from frontdesk.models import User
from frontdesk.notifications import NotificationError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
OTP_MIN = 100000
OTP_MAX = 999999


def hash_password(raw):
    rounds = current_app.config.get('BCRYPT_ROUNDS', 10)
    return bcrypt.hashpw(raw.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def check_password(raw, hashed):
    if not raw or not hashed:
        return False
    return bcrypt.checkpw(raw.encode('utf-8'), hashed.encode('utf-8'))


def validate_password(raw):
    if len(raw) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')


def set_password(user, raw):
    validate_password(raw)
    user.password = hash_password(raw)


def generate_otp():
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def hash_otp(code):
    return hashlib.sha256(code.encode('utf-8')).hexdigest()


def issue_reset(email, mailer):
    """Store a fresh reset code for ``email`` and send it out.

    The code stays valid even when delivery fails; the caller may simply
    ask again.
    """
    user = User.query.filter_by(email=email).first()
    if not user:
        raise NotFoundError('User not found')

    code = generate_otp()
    ttl = timedelta(minutes=current_app.config.get('OTP_TTL_MINUTES', 10))
    user.reset_otp_hash = hash_otp(code)
    user.reset_otp_expires = timewindow.now() + ttl
    db.session.commit()

    try:
        mailer.send_otp(email, code)
    except NotificationError:
        logger.exception('Reset code delivery failed for %s', email)
        raise InternalError('Failed to send OTP email') from None

    logger.info('Password reset requested for %s', email)
    return user


def consume_reset(email, otp, new_password):
    # Checked before the code so a bad password says nothing about the code
    validate_password(new_password)

    user = User.query.filter(
        User.email == email,
        User.reset_otp_hash == hash_otp(otp),
        User.reset_otp_expires > timewindow.now(),
    ).first()
    if not user:
        logger.warning('Rejected password reset for %s', email)
        raise InvalidOtpError()

    set_password(user, new_password)
    user.reset_otp_hash = None
    user.reset_otp_expires = None
    db.session.commit()

    logger.info('Password reset completed for %s', email)
    return user
