"""
Contact-form email notification over SMTP.
Sending is best-effort: the contact message is already persisted, so a
failure here is logged and never reaches the client.
"""
import asyncio
import logging
import smtplib
from email.message import EmailMessage

from portfolio.config import settings
from portfolio.models import ContactMessage

logger = logging.getLogger(__name__)


def smtp_configured() -> bool:
    return bool(settings.SMTP_HOST and settings.SMTP_USER and settings.SMTP_PASSWORD)


def build_notification(message: ContactMessage) -> EmailMessage:
    sender = settings.SMTP_FROM or settings.SMTP_USER
    email = EmailMessage()
    email["Subject"] = f"Nouveau message de contact: {message.name}"
    email["From"] = f"Portfolio <{sender}>"
    email["To"] = settings.SMTP_TO or sender
    email["Reply-To"] = message.email
    email.set_content(
        f"Nom: {message.name}\n"
        f"Email: {message.email}\n\n"
        f"Message:\n{message.message}"
    )
    return email


def _send_email(email: EmailMessage) -> None:
    if settings.SMTP_SECURE:
        with smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=15) as server:
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            server.send_message(email)
    else:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=15) as server:
            server.starttls()
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            server.send_message(email)


async def notify_contact_message(message: ContactMessage) -> bool:
    """
    Email the site owner about a new contact message.

    Returns:
        bool: True if the email was sent
    """
    if not smtp_configured():
        logger.debug("SMTP not configured, skipping contact notification")
        return False

    try:
        await asyncio.to_thread(_send_email, build_notification(message))
    except Exception as e:
        logger.warning(f"Contact notification not sent for message {message.id}: {str(e)}")
        return False

    logger.info(f"Contact notification sent for message {message.id}")
    return True
