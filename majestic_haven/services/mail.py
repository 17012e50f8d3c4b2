import logging
import datetime
import requests
from ..config import settings
from ..templating import templates

logger = logging.getLogger(__name__)

MAILGUN_API_BASE = "https://api.mailgun.net/v3"


def send_booking_confirmation(booking_id: str, guest_email: str, context: dict) -> bool:
    """Sends the booking confirmation email to the guest using the Mailgun API.

    ``context`` is rendered into ``emails/booking_confirmation.html`` and must
    carry plain values (the request's DB session is closed by the time this
    runs as a background task). Returns True when Mailgun accepted the message.
    """
    if not settings.MAILGUN_API_KEY or not settings.MAILGUN_DOMAIN:
        logger.warning("Mailgun API key or domain not configured. Skipping confirmation for booking %s.", booking_id)
        return False

    confirmation_url = f"{settings.BASE_URL}/booking/confirmation/{booking_id}"
    template_body = templates.get_template("emails/booking_confirmation.html").render({
        **context,
        "app_name": settings.APP_NAME,
        "confirmation_url": confirmation_url,
        "current_year": datetime.datetime.now().year,
    })

    mailgun_url = f"{MAILGUN_API_BASE}/{settings.MAILGUN_DOMAIN}/messages"
    auth = ("api", settings.MAILGUN_API_KEY)
    data = {
        "from": f"{settings.APP_NAME} <{settings.MAIL_FROM}>",
        "to": [guest_email],
        "subject": f"Your {settings.APP_NAME} booking is confirmed",
        "html": template_body,
    }

    try:
        response = requests.post(mailgun_url, auth=auth, data=data, timeout=10)
        response.raise_for_status()  # Raise an exception for bad status codes (4xx or 5xx)
        logger.info("Booking confirmation %s sent to %s via Mailgun.", booking_id, guest_email)
        return True
    except requests.exceptions.RequestException as e:
        logger.error("Failed to send booking confirmation %s to %s via Mailgun: %s", booking_id, guest_email, e)
        return False
