"""
Out-of-band delivery of password reset codes.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

OTP_SUBJECT = 'Your OTP for Password Reset'


class NotificationError(Exception):
    pass


class OtpMailer(Protocol):
    def send_otp(self, email: str, code: str) -> None:
        ...


class SMTPOtpMailer:
    """Sends reset codes through an SMTP relay."""

    def __init__(self, host: str, port: int,
                 username: Optional[str] = None, password: Optional[str] = None,
                 use_tls: bool = True, sender_name: str = 'Hotel Management',
                 ttl_minutes: int = 10, timeout: int = 10):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender_name = sender_name
        self.ttl_minutes = ttl_minutes
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            host=config['MAIL_SERVER'],
            port=config['MAIL_PORT'],
            username=config.get('MAIL_USERNAME'),
            password=config.get('MAIL_PASSWORD'),
            use_tls=config.get('MAIL_USE_TLS', True),
            sender_name=config.get('MAIL_SENDER', 'Hotel Management'),
            ttl_minutes=config.get('OTP_TTL_MINUTES', 10),
        )

    def build_message(self, email: str, code: str) -> EmailMessage:
        message = EmailMessage()
        message['Subject'] = OTP_SUBJECT
        message['From'] = f'"{self.sender_name}" <{self.username or "no-reply@localhost"}>'
        message['To'] = email
        message.set_content(
            f'Your OTP to reset your password is: {code}. '
            f'It is valid for {self.ttl_minutes} minutes.'
        )
        return message

    def send_otp(self, email: str, code: str) -> None:
        message = self.build_message(email, code)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f'Could not deliver reset code to {email}') from exc
        logger.info('Reset code sent to %s', email)
