"""
SMTP Email Channel
==================
Sends multipart (plain text + HTML) email through an SMTP server.
"""

import asyncio
import functools
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid
import structlog

from .base import DeliveryChannel, DeliveryReceipt
from .config import SMTPConfig
from .exceptions import PermanentDeliveryError, TransientDeliveryError

logger = structlog.get_logger(__name__)


class SMTPEmailChannel(DeliveryChannel):
    """
    Email delivery over SMTP.

    smtplib is blocking, so each send runs in the default executor and never
    stalls the event loop.
    """

    name = "smtp"

    def __init__(self, config: SMTPConfig):
        self.config = config

    def build_message(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str,
    ) -> EmailMessage:
        """Build a multipart/alternative message with text first."""
        msg = EmailMessage()
        msg["From"] = self.config.from_header
        msg["To"] = recipient
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid(domain=self.config.from_address.rpartition("@")[2] or None)
        msg.set_content(body_text)
        msg.add_alternative(body_html, subtype="html")
        return msg

    async def send(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str,
    ) -> DeliveryReceipt:
        msg = self.build_message(recipient, subject, body_html, body_text)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, functools.partial(self._send_sync, msg))
        return DeliveryReceipt(
            channel=self.name,
            recipient=recipient,
            provider_message_id=msg["Message-ID"],
        )

    def _open(self) -> smtplib.SMTP:
        cfg = self.config
        if cfg.use_implicit_tls:
            return smtplib.SMTP_SSL(
                cfg.host, cfg.port, timeout=cfg.timeout, context=ssl.create_default_context()
            )
        return smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout)

    def _send_sync(self, msg: EmailMessage) -> None:
        cfg = self.config
        try:
            with self._open() as server:
                if not cfg.use_implicit_tls:
                    server.ehlo()
                    if server.has_extn("starttls"):
                        server.starttls(context=ssl.create_default_context())
                        server.ehlo()
                if cfg.auth_user:
                    server.login(cfg.auth_user, cfg.auth_secret)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            raise PermanentDeliveryError(
                "SMTP authentication failed", channel=self.name, status_code=e.smtp_code
            ) from e
        except smtplib.SMTPRecipientsRefused as e:
            raise PermanentDeliveryError("Recipient refused", channel=self.name) from e
        except (smtplib.SMTPServerDisconnected, smtplib.SMTPConnectError) as e:
            raise TransientDeliveryError(
                f"SMTP connection failed: {type(e).__name__}", channel=self.name
            ) from e
        except smtplib.SMTPResponseException as e:
            if 400 <= e.smtp_code < 500:
                raise TransientDeliveryError(
                    "SMTP temporary failure", channel=self.name, status_code=e.smtp_code
                ) from e
            raise PermanentDeliveryError(
                "SMTP permanent failure", channel=self.name, status_code=e.smtp_code
            ) from e
        except smtplib.SMTPException as e:
            raise PermanentDeliveryError(
                f"SMTP error: {type(e).__name__}", channel=self.name
            ) from e
        except OSError as e:
            # Timeouts, refused connections, DNS failures
            raise TransientDeliveryError(
                f"SMTP transport error: {type(e).__name__}", channel=self.name
            ) from e
