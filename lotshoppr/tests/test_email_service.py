"""Tests for email service - rendering, SMTP and SendGrid delivery of dealer emails."""

import pytest
from unittest.mock import patch, MagicMock

from lotshoppr.services.email_service import (
    EmailSendError,
    render_html,
    send_email,
    send_generated_email,
)
from lotshoppr.services.offer_models import GeneratedEmail

DRAFT = GeneratedEmail(
    subject="Re: 2024 Honda CR-V - can we get closer?",
    body="Hi,\n\nYour OTD figure of $32,000 is a bit above where I'm comfortable.\n\nThanks,\nJordan <Lee>",
)


@pytest.fixture
def smtp_settings():
    with patch("lotshoppr.services.email_service.get_settings") as mock_settings:
        settings = mock_settings.return_value
        settings.email_provider = "smtp"
        settings.smtp_host = "localhost"
        settings.smtp_port = 587
        settings.smtp_use_tls = True
        settings.smtp_username = "user"
        settings.smtp_password = "pass"
        settings.email_from_address = "deals@lotshoppr.test"
        settings.email_from_name = "LotShoppr"
        settings.sendgrid_api_key = ""
        yield settings


@pytest.fixture
def smtp_server():
    with patch("lotshoppr.services.email_service.smtplib.SMTP") as mock_smtp_class:
        mock_server = MagicMock()
        mock_smtp_class.return_value.__enter__ = MagicMock(return_value=mock_server)
        mock_smtp_class.return_value.__exit__ = MagicMock(return_value=False)
        yield mock_server


class TestRenderHtml:

    def test_paragraphs_and_line_breaks(self):
        html = render_html(DRAFT)
        assert html.count("<p>") == 3
        assert "Thanks,<br>" in html

    def test_body_text_is_escaped(self):
        html = render_html(DRAFT)
        assert "Jordan &lt;Lee&gt;" in html
        assert "<Lee>" not in html


class TestEmailServiceSMTP:

    def test_smtp_send_success(self, smtp_settings, smtp_server):
        send_email("sales@dealer.test", "Test Subject", "<p>Hello</p>", "Hello")

        smtp_server.starttls.assert_called_once()
        smtp_server.login.assert_called_once_with("user", "pass")
        smtp_server.send_message.assert_called_once()

    def test_smtp_sets_reply_to(self, smtp_settings, smtp_server):
        send_email("sales@dealer.test", "Subject", "<p>Hi</p>", reply_to="jordan@example.com")

        msg = smtp_server.send_message.call_args[0][0]
        assert msg["Reply-To"] == "jordan@example.com"
        assert msg["To"] == "sales@dealer.test"
        assert msg["From"] == "LotShoppr <deals@lotshoppr.test>"

    def test_smtp_without_reply_to(self, smtp_settings, smtp_server):
        send_email("sales@dealer.test", "Subject", "<p>Hi</p>")

        msg = smtp_server.send_message.call_args[0][0]
        assert msg["Reply-To"] is None

    def test_smtp_send_without_tls(self, smtp_settings, smtp_server):
        smtp_settings.smtp_use_tls = False
        smtp_settings.smtp_username = ""

        send_email("sales@dealer.test", "Test", "<p>Hi</p>")

        smtp_server.starttls.assert_not_called()
        smtp_server.login.assert_not_called()

    @patch("lotshoppr.services.email_service.smtplib.SMTP")
    def test_smtp_send_failure_raises_email_send_error(self, mock_smtp_class, smtp_settings):
        mock_smtp_class.side_effect = ConnectionRefusedError("Connection refused")

        with pytest.raises(EmailSendError):
            send_email("sales@dealer.test", "Test", "<p>Fail</p>")


class TestEmailServiceSendGrid:

    @pytest.fixture
    def sendgrid_settings(self):
        with patch("lotshoppr.services.email_service.get_settings") as mock_settings:
            settings = mock_settings.return_value
            settings.email_provider = "sendgrid"
            settings.sendgrid_api_key = "SG.test_key"
            settings.email_from_address = "deals@lotshoppr.test"
            settings.email_from_name = "LotShoppr"
            yield settings

    def test_sendgrid_send_success(self, sendgrid_settings):
        with patch("sendgrid.SendGridAPIClient") as mock_sg_class:
            mock_client = MagicMock()
            mock_client.send.return_value = MagicMock(status_code=202)
            mock_sg_class.return_value = mock_client

            send_email("sales@dealer.test", "Test Subject", "<p>Hello</p>", "Hello",
                       reply_to="jordan@example.com")

            mock_sg_class.assert_called_once_with("SG.test_key")
            mock_client.send.assert_called_once()

    def test_sendgrid_send_failure_raises_email_send_error(self, sendgrid_settings):
        with patch("sendgrid.SendGridAPIClient") as mock_sg_class:
            mock_client = MagicMock()
            mock_client.send.side_effect = Exception("API error")
            mock_sg_class.return_value = mock_client

            with pytest.raises(EmailSendError):
                send_email("sales@dealer.test", "Test", "<p>Fail</p>")


class TestEmailProviderRouting:

    @patch("lotshoppr.services.email_service._send_via_sendgrid")
    @patch("lotshoppr.services.email_service.get_settings")
    def test_routes_to_sendgrid_when_configured(self, mock_settings, mock_sendgrid):
        settings = mock_settings.return_value
        settings.email_provider = "sendgrid"
        settings.sendgrid_api_key = "SG.key"

        send_email("sales@dealer.test", "Test", "<p>Hi</p>")

        mock_sendgrid.assert_called_once()

    @patch("lotshoppr.services.email_service._send_via_smtp")
    @patch("lotshoppr.services.email_service.get_settings")
    def test_sendgrid_without_key_falls_back_to_smtp(self, mock_settings, mock_smtp):
        settings = mock_settings.return_value
        settings.email_provider = "sendgrid"
        settings.sendgrid_api_key = ""

        send_email("sales@dealer.test", "Test", "<p>Hi</p>")

        mock_smtp.assert_called_once()

    @patch("lotshoppr.services.email_service.send_email")
    def test_generated_email_keeps_plain_text_part(self, mock_send):
        send_generated_email("sales@dealer.test", DRAFT, reply_to="jordan@example.com")

        to_email, subject, html_body, text_body = mock_send.call_args[0]
        assert to_email == "sales@dealer.test"
        assert subject == DRAFT.subject
        assert text_body == DRAFT.body
        assert "<p>" in html_body
        assert mock_send.call_args[1] == {"reply_to": "jordan@example.com"}
