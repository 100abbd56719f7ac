from typing import Any, Dict

from loguru import logger

from taskboard.core.errors import EmailTransportError
from taskboard.services.email_service import SMTPEmailSender
from taskboard.tasks.worker import celery_app


@celery_app.task(
    name="send_email",
    autoretry_for=(EmailTransportError,),
    retry_backoff=True,
    max_retries=3,
)
def send_email(to_address: str, subject: str, html_body: str) -> Dict[str, Any]:
    """
    Deliver one email through SMTP.
    """
    logger.info(f"Sending email '{subject}' to {to_address}")
    message_id = SMTPEmailSender().send(to_address, subject, html_body)
    return {"success": True, "message_id": message_id}
