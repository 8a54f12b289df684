"""Outgoing email."""

from __future__ import annotations

from flask import current_app
from flask_mail import Mail, Message

mail = Mail()

PASSWORD_RESET_TEMPLATE = """\
Dear {name},

You have requested to reset your password. Please use the following One-Time Password (OTP) to proceed with the password reset process:

OTP: {otp}

This OTP is valid for {minutes} minutes. If you did not request a password reset, please disregard this email.

Best regards,
LALA RENTAL BOOKING Support Team
"""


def send_email(to: str, subject: str, body: str) -> None:
    message = Message(subject=subject, recipients=[to], body=body)
    mail.send(message)
    current_app.logger.info("Sent email '%s' to %s", subject, to)


def send_password_reset_email(to: str, name: str | None, otp: str, minutes: int) -> None:
    body = PASSWORD_RESET_TEMPLATE.format(name=name or "User", otp=otp, minutes=minutes)
    send_email(to, "Password Reset - One-Time Password (OTP)", body)
