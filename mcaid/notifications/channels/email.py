"""
Email Sender using custom SMTP (preferred) or Resend (fallback)
Both transports are blocking SDKs, so they run in a worker thread.
"""

import asyncio
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Optional

import resend

from ..events import Channel, DispatchOutcome, Recipient
from ..exceptions import TransportError
from ..messages import EmailMessage
from .base import ChannelSender

logger = logging.getLogger(__name__)


class EmailSender(ChannelSender):
    channel = Channel.EMAIL

    def __init__(
        self,
        from_address: str,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        smtp_use_tls: bool = True,
        resend_api_key: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.from_address = from_address
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.smtp_use_tls = smtp_use_tls
        self.resend_api_key = resend_api_key
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.smtp_host or self.resend_api_key)

    async def send(self, recipient: Recipient, message: EmailMessage) -> DispatchOutcome:
        to = recipient.email or ""
        if not self.is_configured():
            logger.info(f"ℹ️ Email not configured, skipping email to {to}")
            return DispatchOutcome.skip(self.channel, to, "Email service not configured")

        if self.smtp_host:
            logger.info(f"📧 Sending email via SMTP {self.smtp_host} to {to}")
            message_id = await asyncio.to_thread(self._send_via_smtp, to, message)
        else:
            logger.info(f"📧 Sending email via Resend to {to}")
            message_id = await asyncio.to_thread(self._send_via_resend, to, message)

        logger.info(f"✅ Email sent successfully to {to} ({message_id})")
        return DispatchOutcome.sent(self.channel, to, message_id=message_id)

    def _send_via_smtp(self, to: str, message: EmailMessage) -> str:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = self.from_address
        msg["To"] = to
        message_id = make_msgid(domain="mcaid.app")
        msg["Message-ID"] = message_id

        if message.text:
            msg.attach(MIMEText(message.text, "plain"))
        msg.attach(MIMEText(message.html, "html"))

        try:
            if self.smtp_port == 465:
                context = ssl.create_default_context()
                server = smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, context=context, timeout=self.timeout)
            else:
                server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout)

            with server:
                if self.smtp_port != 465 and self.smtp_use_tls:
                    server.starttls(context=ssl.create_default_context())
                if self.smtp_username:
                    server.login(self.smtp_username, self.smtp_password or "")
                server.sendmail(self.from_address.split("<")[-1].rstrip(">"), [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ SMTP send failed via {self.smtp_host}: {e}")
            raise TransportError(self.channel.value, f"SMTP failed: {e}") from e

        return message_id

    def _send_via_resend(self, to: str, message: EmailMessage) -> Optional[str]:
        resend.api_key = self.resend_api_key
        email_data = {
            "from": self.from_address,
            "to": [to],
            "subject": message.subject,
            "html": message.html,
        }
        if message.text:
            email_data["text"] = message.text

        try:
            response = resend.Emails.send(email_data)
        except Exception as e:
            logger.error(f"❌ Resend send failed to {to}: {e}")
            raise TransportError(self.channel.value, f"Resend failed: {e}") from e

        return response.get("id") if isinstance(response, dict) else None
