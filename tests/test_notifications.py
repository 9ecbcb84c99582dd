import smtplib

import pytest

from frontdesk.notifications import NotificationError, SMTPOtpMailer


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls = []
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append('starttls')

    def login(self, username, password):
        self.calls.append(('login', username))

    def send_message(self, message):
        self.sent.append(message)


class RefusingSMTP(FakeSMTP):
    def send_message(self, message):
        raise smtplib.SMTPRecipientsRefused({message['To']: (550, b'no such user')})


@pytest.fixture
def mailer():
    FakeSMTP.instances = []
    return SMTPOtpMailer('smtp.example.com', 587, username='desk@example.com', password='app-pass')


def test_message_text(mailer):
    message = mailer.build_message('user@example.com', '482913')
    assert message['Subject'] == 'Your OTP for Password Reset'
    assert message['To'] == 'user@example.com'
    assert '<desk@example.com>' in message['From']
    assert 'Your OTP to reset your password is: 482913.' in message.get_content()
    assert 'valid for 10 minutes' in message.get_content()


def test_send_uses_tls_and_login(mailer, monkeypatch):
    monkeypatch.setattr(smtplib, 'SMTP', FakeSMTP)
    mailer.send_otp('user@example.com', '482913')
    [smtp] = FakeSMTP.instances
    assert (smtp.host, smtp.port) == ('smtp.example.com', 587)
    assert smtp.calls == ['starttls', ('login', 'desk@example.com')]
    assert smtp.sent[0]['To'] == 'user@example.com'


def test_delivery_failure_is_wrapped(mailer, monkeypatch):
    monkeypatch.setattr(smtplib, 'SMTP', RefusingSMTP)
    with pytest.raises(NotificationError):
        mailer.send_otp('user@example.com', '482913')


def test_from_config():
    mailer = SMTPOtpMailer.from_config({
        'MAIL_SERVER': 'mail.hotel.test',
        'MAIL_PORT': 2525,
        'MAIL_USERNAME': None,
        'MAIL_PASSWORD': None,
        'MAIL_USE_TLS': False,
        'OTP_TTL_MINUTES': 15,
    })
    assert mailer.host == 'mail.hotel.test'
    assert mailer.use_tls is False
    assert 'valid for 15 minutes' in mailer.build_message('a@b.test', '123456').get_content()


def test_anonymous_relay_skips_login(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, 'SMTP', FakeSMTP)
    mailer = SMTPOtpMailer('localhost', 25, use_tls=False)
    mailer.send_otp('user@example.com', '482913')
    [smtp] = FakeSMTP.instances
    assert smtp.calls == []
    assert '<no-reply@localhost>' in smtp.sent[0]['From']
