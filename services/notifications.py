"""HTML bodies for the notification emails."""

from __future__ import annotations

from datetime import timedelta
from email.message import EmailMessage

from markupsafe import escape

from services.mailer import Mailer

_WRAPPER = '<div style="font-family: Arial, sans-serif; line-height: 1.6;">{}</div>'


def password_reset_email(
    mailer: Mailer, to: str, name: str | None, reset_url: str, expires_in: timedelta
) -> EmailMessage:
    minutes = int(expires_in.total_seconds() // 60)
    body = (
        '<h2 style="color: #333;">Password Reset Request</h2>'
        f"<p>Hello {escape(name or 'User')},</p>"
        "<p>You requested a password reset. Click the button below to reset your password:</p>"
        f'<a href="{escape(reset_url)}" style="display: inline-block; padding: 10px 20px; '
        'background: #007bff; color: #fff; text-decoration: none; border-radius: 5px;">'
        "Reset Password</a>"
        f"<p>This link will expire in {minutes} minutes.</p>"
        "<p>If you didn't request this, please ignore this email.</p>"
        "<p>Best regards,<br>Portfolio Team</p>"
    )
    return mailer.build_message(to, "Password Reset Request", _WRAPPER.format(body))


def contact_email(
    mailer: Mailer, to: str, name: str, email: str, subject: str, message: str
) -> EmailMessage:
    lines = "<br>".join(str(escape(line)) for line in message.splitlines())
    body = (
        '<h2 style="color: #333;">New Contact Form Submission</h2>'
        f"<p><strong>Name:</strong> {escape(name)}</p>"
        f'<p><strong>Email:</strong> <a href="mailto:{escape(email)}">{escape(email)}</a></p>'
        f"<p><strong>Subject:</strong> {escape(subject)}</p>"
        "<p><strong>Message:</strong></p>"
        f'<div style="background: #f4f4f4; padding: 10px; border-left: 3px solid #ccc;">{lines}</div>'
    )
    return mailer.build_message(
        to, f"Contact Form: {subject}", _WRAPPER.format(body), reply_to=email
    )


def recommendation_email(
    mailer: Mailer, to: str, name: str, position: str, company: str, admin_url: str
) -> EmailMessage:
    body = (
        '<h2 style="color: #333;">New Recommendation</h2>'
        f"<p><strong>From:</strong> {escape(name)} ({escape(position)}, {escape(company)})</p>"
        f'<p>Please visit your <a href="{escape(admin_url)}">admin dashboard</a> '
        "to review and approve the recommendation.</p>"
    )
    return mailer.build_message(to, "New Recommendation Received", _WRAPPER.format(body))
