"""
Email Utilities for Theme Park Wait Watch

Provides centralized email sending functionality using SendGrid.
Used for operator alerts when every wait time source is failing.
"""

from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, Email, To, Content

from utils.config import (
    SENDGRID_API_KEY, ALERT_EMAIL_FROM, ALERT_EMAIL_TO
)
from utils.logger import logger


def _send(message: Mail, description: str) -> bool:
    """Send a prepared message and report whether SendGrid accepted it."""
    try:
        sg = SendGridAPIClient(SENDGRID_API_KEY)
        response = sg.send(message)

        if 200 <= response.status_code < 300:
            logger.info(f"Email sent successfully: {description} (status: {response.status_code})")
            return True
        else:
            logger.error(f"SendGrid returned non-2xx status: {response.status_code}")
            return False

    except Exception as e:
        logger.error(f"Failed to send email ({description}): {e}")
        return False


def send_alert_email(
    subject: str,
    body: str,
    alert_type: str = "general",
    to_email: Optional[str] = None,
    from_email: Optional[str] = None,
) -> bool:
    """
    Send an operator alert email via SendGrid.

    Args:
        subject: Email subject line
        body: Email body content (plain text)
        alert_type: Type of alert (for logging/categorization)
        to_email: Optional recipient email (defaults to ALERT_EMAIL_TO)
        from_email: Optional sender email (defaults to ALERT_EMAIL_FROM)

    Returns:
        True if email sent successfully, False otherwise
    """
    if not SENDGRID_API_KEY:
        logger.error("SENDGRID_API_KEY not set - cannot send email")
        return False

    to_email = to_email or ALERT_EMAIL_TO
    from_email = from_email or ALERT_EMAIL_FROM

    if not to_email or not from_email:
        logger.error("Email addresses not configured")
        return False

    message = Mail(
        from_email=Email(from_email, "Theme Park Wait Watch"),
        to_emails=To(to_email),
        subject=subject,
        plain_text_content=Content("text/plain", body),
    )
    return _send(message, alert_type)
