"""Celery task for delivering drafted dealer emails."""

import logging

from lotshoppr.celery_app import app
from lotshoppr.services.email_service import send_generated_email, EmailSendError
from lotshoppr.services.offer_models import GeneratedEmail

logger = logging.getLogger(__name__)


@app.task(bind=True, max_retries=3, default_retry_delay=120)
def send_dealer_email(
    self,
    lead_id: str,
    dealer_id: str,
    to_email: str,
    subject: str,
    body: str,
    reply_to: str | None = None,
):
    """Send one drafted email to a dealer on behalf of a lead."""
    try:
        send_generated_email(to_email, GeneratedEmail(subject=subject, body=body), reply_to=reply_to)
        logger.info("Dealer email sent to %s (lead=%s, dealer=%s)", to_email, lead_id, dealer_id)
        return {"status": "sent", "to": to_email, "lead_id": lead_id, "dealer_id": dealer_id}
    except EmailSendError as exc:
        logger.exception("Dealer email failed to %s (lead=%s, dealer=%s)", to_email, lead_id, dealer_id)
        raise self.retry(exc=exc)
