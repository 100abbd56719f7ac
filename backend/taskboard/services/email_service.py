import smtplib
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Optional, Protocol

from loguru import logger

from taskboard.core.config import settings
from taskboard.core.errors import EmailTransportError


class EmailSender(Protocol):
    """Anything able to hand an HTML email to a transport."""
    def send(self, to_address: str, subject: str, html_body: str) -> str: ...


def render_invite_email(project_name: str, invite_url: str) -> str:
    return f"""\
<html>
  <body style="font-family: Arial, sans-serif; color: #222;">
    <h2>You have been invited to {project_name}</h2>
    <p>Someone added you to the project <strong>{project_name}</strong> on {settings.APP_NAME}.</p>
    <p>
      <a href="{invite_url}"
         style="background:#2563eb;color:#fff;padding:10px 16px;border-radius:4px;text-decoration:none;">
        Accept invitation
      </a>
    </p>
    <p>If the button does not work, open this link: {invite_url}</p>
  </body>
</html>
"""


class SMTPEmailSender:
    """
    Sends mail synchronously over SMTP with STARTTLS.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        from_address: Optional[str] = None,
        use_tls: Optional[bool] = None,
        timeout: Optional[int] = None,
    ):
        self.host = host or settings.MAIL_HOST
        self.port = port or settings.MAIL_PORT
        self.username = username if username is not None else settings.MAIL_USERNAME
        self.password = password if password is not None else settings.MAIL_PASSWORD
        self.from_address = from_address or settings.MAIL_FROM_ADDRESS
        self.use_tls = settings.MAIL_USE_TLS if use_tls is None else use_tls
        self.timeout = timeout or settings.MAIL_TIMEOUT

    def build_message(self, to_address: str, subject: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((settings.APP_NAME, self.from_address))
        message["To"] = to_address
        message["Subject"] = subject
        message["Message-ID"] = make_msgid(domain=self.from_address.split("@")[-1])
        message.set_content("Open this email in an HTML capable client.")
        message.add_alternative(html_body, subtype="html")
        return message

    def send(self, to_address: str, subject: str, html_body: str) -> str:
        message = self.build_message(to_address, subject, html_body)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending email to {to_address}: {str(e)}")
            raise EmailTransportError(str(e), recipient=to_address)

        logger.info(f"Email sent to {to_address}, message ID: {message['Message-ID']}")
        return message["Message-ID"]


class CeleryEmailSender:
    """
    Queues delivery on the Celery worker; the task id stands in for the message id.
    """

    def send(self, to_address: str, subject: str, html_body: str) -> str:
        from taskboard.tasks.email_tasks import send_email

        try:
            result = send_email.delay(to_address, subject, html_body)
        except Exception as e:
            logger.error(f"Error queueing email to {to_address}: {str(e)}")
            raise EmailTransportError(str(e), recipient=to_address)
        return result.id
