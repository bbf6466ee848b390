"""Email service: delivers drafted dealer emails via SendGrid API or SMTP."""

import logging
import os
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from jinja2 import Environment, FileSystemLoader

from lotshoppr.config.settings import get_settings
from lotshoppr.services.offer_models import GeneratedEmail

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "..", "templates", "email")
_jinja_env = Environment(
    loader=FileSystemLoader(_TEMPLATE_DIR),
    autoescape=True,
)


class EmailSendError(Exception):
    """Raised when email delivery fails."""
    pass


def render_html(email: GeneratedEmail) -> str:
    """Render a plain-text drafted email as simple HTML paragraphs."""
    paragraphs = [block.split("\n") for block in email.body.split("\n\n") if block.strip()]
    template = _jinja_env.get_template("dealer_message.html")
    return template.render(subject=email.subject, paragraphs=paragraphs)


def send_generated_email(to_email: str, email: GeneratedEmail, reply_to: str | None = None) -> None:
    """Send a drafted email, keeping the plain-text body as the text part."""
    send_email(to_email, email.subject, render_html(email), email.body, reply_to=reply_to)


def send_email(
    to_email: str,
    subject: str,
    html_body: str,
    text_body: str | None = None,
    reply_to: str | None = None,
) -> None:
    """Send an email using the configured provider."""
    settings = get_settings()
    if settings.email_provider == "sendgrid" and settings.sendgrid_api_key:
        _send_via_sendgrid(to_email, subject, html_body, text_body, reply_to, settings)
    else:
        _send_via_smtp(to_email, subject, html_body, text_body, reply_to, settings)


def _send_via_sendgrid(
    to_email: str, subject: str, html_body: str, text_body: str | None, reply_to: str | None, settings
) -> None:
    """Send email via SendGrid API."""
    try:
        from sendgrid import SendGridAPIClient
        from sendgrid.helpers.mail import Mail, Email, To, Content, ReplyTo

        message = Mail(
            from_email=Email(settings.email_from_address, settings.email_from_name),
            to_emails=To(to_email),
            subject=subject,
        )
        if text_body:
            message.add_content(Content("text/plain", text_body))
        message.add_content(Content("text/html", html_body))
        if reply_to:
            message.reply_to = ReplyTo(reply_to)

        sg = SendGridAPIClient(settings.sendgrid_api_key)
        response = sg.send(message)
        logger.info("Email sent via SendGrid to %s (status=%s)", to_email, response.status_code)
    except Exception as exc:
        logger.exception("SendGrid email delivery failed to %s", to_email)
        raise EmailSendError("Email delivery failed") from exc


def _send_via_smtp(
    to_email: str, subject: str, html_body: str, text_body: str | None, reply_to: str | None, settings
) -> None:
    """Send email via SMTP."""
    try:
        msg = MIMEMultipart("alternative")
        msg["From"] = f"{settings.email_from_name} <{settings.email_from_address}>"
        msg["To"] = to_email
        msg["Subject"] = subject
        if reply_to:
            msg["Reply-To"] = reply_to

        if text_body:
            msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            if settings.smtp_use_tls:
                server.starttls()
            if settings.smtp_username:
                server.login(settings.smtp_username, settings.smtp_password)
            server.send_message(msg)

        logger.info("Email sent via SMTP to %s", to_email)
    except Exception as exc:
        logger.exception("SMTP email delivery failed to %s", to_email)
        raise EmailSendError("Email delivery failed") from exc
