"""Shared fixtures: an app on in-memory SQLite, fake collaborators, a movable clock."""

from datetime import datetime
from decimal import Decimal

import pytest

from frontdesk import create_app, db, timewindow
from frontdesk.config import TestingConfig
from frontdesk.models import Booking, Guest, Room
from frontdesk.notifications import NotificationError

REGISTRATION_KEY = TestingConfig.HOTEL_REGISTRATION_KEY


class RecordingMailer:
    def __init__(self):
        self.sent = []

    def send_otp(self, email, code):
        self.sent.append((email, code))

    @property
    def last_code(self):
        return self.sent[-1][1]


class FailingMailer:
    def send_otp(self, email, code):
        raise NotificationError('relay down')


class RecordingProofStore:
    def __init__(self):
        self.uploads = []

    def upload_image(self, data):
        self.uploads.append(data)
        return f'https://proofs.example.com/{len(self.uploads)}.jpg'


class Clock:
    def __init__(self, start):
        self.current = start

    def __call__(self):
        return self.current

    def advance(self, delta):
        self.current += delta


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    app.extensions['frontdesk.mailer'] = RecordingMailer()
    app.extensions['frontdesk.proof_store'] = RecordingProofStore()
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def mailer(app):
    return app.extensions['frontdesk.mailer']


@pytest.fixture
def proof_store(app):
    return app.extensions['frontdesk.proof_store']


@pytest.fixture
def clock(monkeypatch):
    clock = Clock(datetime(2024, 6, 1, 12, 0))
    monkeypatch.setattr(timewindow, 'now', clock)
    return clock


@pytest.fixture
def make_room(app):
    def _make_room(number='101', type='double', price='120.00', status='available'):
        room = Room(number=number, type=type, price=Decimal(price), status=status)
        db.session.add(room)
        db.session.commit()
        return room
    return _make_room


@pytest.fixture
def make_booking(app):
    def _make_booking(room, check_in, check_out, name='Existing Guest'):
        guest = Guest(name=name, phone='555-0100', id_proof_url='https://proofs.example.com/seed.jpg')
        booking = Booking(guest=guest, room=room, check_in=check_in, check_out=check_out)
        db.session.add_all([guest, booking])
        db.session.commit()
        return booking
    return _make_booking


def register_payload(**overrides):
    payload = {
        'username': 'frontdesk',
        'email': 'user@example.com',
        'password': 'secret123',
        'key': REGISTRATION_KEY,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def token(client):
    response = client.post('/api/auth/register', json=register_payload())
    assert response.status_code == 201
    return response.get_json()['token']


@pytest.fixture
def auth_headers(token):
    return {'Authorization': f'Bearer {token}'}
