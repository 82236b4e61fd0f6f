"""
Twilio SMS Channel
==================
Delivers the plain-text form of a message over the Twilio Messages API.
"""

from base64 import b64encode
from typing import Optional

import httpx
import structlog

from .base import DeliveryChannel, DeliveryReceipt
from .config import TwilioConfig
from .exceptions import PermanentDeliveryError, TransientDeliveryError

logger = structlog.get_logger(__name__)


class TwilioSMSChannel(DeliveryChannel):
    """
    SMS delivery via Twilio.

    The subject and HTML body are ignored; SMS carries ``body_text`` only.
    """

    name = "twilio"

    def __init__(
        self,
        config: TwilioConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def initialize(self) -> None:
        """Create HTTP client with auth."""
        auth = b64encode(f"{self.config.account_sid}:{self.config.auth_token}".encode()).decode()
        self._client = httpx.AsyncClient(
            headers={"Authorization": f"Basic {auth}"},
            timeout=self.config.timeout,
            transport=self._transport,
        )
        await super().initialize()

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        await super().close()

    async def send(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str,
    ) -> DeliveryReceipt:
        if not self._client:
            raise RuntimeError("Channel not initialized")

        payload = {
            "To": recipient,
            "Body": body_text.strip(),
        }

        if self.config.messaging_service_sid:
            payload["MessagingServiceSid"] = self.config.messaging_service_sid
        else:
            payload["From"] = self.config.from_number

        try:
            response = await self._client.post(
                f"{self.config.base_url}/Messages.json",
                data=payload,
            )
        except httpx.TimeoutException as e:
            raise TransientDeliveryError("Twilio request timed out", channel=self.name) from e
        except httpx.HTTPError as e:
            raise TransientDeliveryError(
                f"Twilio request failed: {type(e).__name__}", channel=self.name
            ) from e

        if response.status_code in (200, 201):
            data = response.json()
            return DeliveryReceipt(
                channel=self.name,
                recipient=recipient,
                provider_message_id=data.get("sid"),
            )

        error_code = self._error_code(response)
        if response.status_code == 429 or response.status_code >= 500:
            raise TransientDeliveryError(
                f"Twilio unavailable (code {error_code})",
                channel=self.name,
                status_code=response.status_code,
            )
        raise PermanentDeliveryError(
            f"Twilio rejected message (code {error_code})",
            channel=self.name,
            status_code=response.status_code,
        )

    def _error_code(self, response: httpx.Response) -> str:
        """Extract Twilio's error code without trusting the body shape."""
        try:
            return str(response.json().get("code", response.status_code))
        except ValueError:
            return str(response.status_code)
