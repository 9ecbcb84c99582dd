"""
Application configuration.

Values come from the environment (a local ``.env`` file is loaded first).
``create_app`` reads one of the classes below with ``app.config.from_object``.
"""

import logging.config
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY')

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///frontdesk.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.environ.get('JWT_SECRET') or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.environ.get('TOKEN_LIFETIME_DAYS', 15)))

    # Shared secret staff must present to create an account
    HOTEL_REGISTRATION_KEY = os.environ.get('HOTEL_REGISTRATION_KEY')

    BCRYPT_ROUNDS = int(os.environ.get('BCRYPT_ROUNDS', 10))
    OTP_TTL_MINUTES = int(os.environ.get('OTP_TTL_MINUTES', 10))

    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'smtp.gmail.com')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USERNAME = os.environ.get('EMAIL_USER')
    MAIL_PASSWORD = os.environ.get('EMAIL_PASS')
    MAIL_USE_TLS = _env_bool('MAIL_USE_TLS', True)
    MAIL_SENDER = os.environ.get('MAIL_SENDER', 'Hotel Management')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'testing-secret'
    JWT_SECRET_KEY = 'testing-jwt-secret-with-enough-length'
    HOTEL_REGISTRATION_KEY = 'front-desk-key'
    BCRYPT_ROUNDS = 4
    LOG_LEVEL = 'WARNING'


def require_secrets(config):
    """Raise unless both signing keys are configured."""
    missing = [name for name in ('SECRET_KEY', 'JWT_SECRET_KEY') if not config.get(name)]
    if missing:
        raise RuntimeError(f'{", ".join(missing)} must be set before the app can start')


def configure_logging(level='INFO'):
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'standard',
                'level': level,
            },
        },
        'loggers': {
            'frontdesk': {
                'handlers': ['console'],
                'level': level,
                'propagate': True,
            },
        },
    })
