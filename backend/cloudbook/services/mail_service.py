# Overview: Outbound email over an SMTP relay (STARTTLS + login).

from __future__ import annotations

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from flask import current_app


class MailDeliveryError(Exception):
    """Raised when the SMTP relay rejects or cannot accept a message."""


OTP_SUBJECT = "Your OTP Code"


def render_otp_email(code: str, ttl_minutes: int) -> tuple[str, str]:
    """Return (html, text) bodies for an OTP email."""
    html = (
        "<h1>Hi, Welcome to CloudBook!</h1>"
        "<p>"
        f"<b>OTP:</b> Dear Admin, your OTP code is <b>{code}</b>. "
        "Please do not share this PIN with anyone."
        f"<br/>It is valid for {ttl_minutes} minutes."
        "</p>"
        "<p>Best Regards,<br/>CloudBook</p>"
    )
    text = (
        "Hi, Welcome to CloudBook!\n\n"
        f"Dear Admin, your OTP code is {code}. Please do not share this PIN with anyone.\n"
        f"It is valid for {ttl_minutes} minutes.\n\n"
        "Best Regards,\nCloudBook\n"
    )
    return html, text


def send_email(to_email: str, subject: str, body_html: str, body_text: str) -> None:
    """
    Send a multipart (text + html) message through the configured relay.

    With MAIL_SUPPRESS_SEND the message is logged (without its body) and
    dropped.

    Raises MailDeliveryError on any SMTP failure.
    """
    config = current_app.config
    sender = config.get("MAIL_USERNAME") or "no-reply@cloudbook.local"

    if config.get("MAIL_SUPPRESS_SEND"):
        current_app.logger.warning("Mail suppressed: %r to %s", subject, to_email)
        return

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{config.get('MAIL_SENDER_NAME', 'CloudBook')} <{sender}>"
    msg["To"] = to_email
    msg.attach(MIMEText(body_text, "plain"))
    msg.attach(MIMEText(body_html, "html"))

    server, port = config["MAIL_SERVER"], config["MAIL_PORT"]
    current_app.logger.info("Sending %r to %s via %s:%s", subject, to_email, server, port)
    try:
        with smtplib.SMTP(server, port, timeout=30) as client:
            client.starttls()
            if config.get("MAIL_USERNAME"):
                client.login(config["MAIL_USERNAME"], config.get("MAIL_PASSWORD") or "")
            client.sendmail(sender, [to_email], msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        raise MailDeliveryError(f"Failed to send email: {e}") from e


def send_otp_email(to_email: str, code: str) -> None:
    ttl_minutes = max(1, current_app.config.get("OTP_TTL_SECONDS", 120) // 60)
    html, text = render_otp_email(code, ttl_minutes)
    send_email(to_email, OTP_SUBJECT, html, text)
