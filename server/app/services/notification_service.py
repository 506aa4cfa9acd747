"""Transactional email delivery for booking notifications."""

import asyncio
from typing import Optional

import httpx

from ..core.config import settings
from ..core.observability import get_logger, metrics_collector
from .email_templates import BookingEmailDetails, admin_alert, customer_confirmation

logger = get_logger(__name__)

EMAIL_TIMEOUT_SECONDS = 10.0


class NotificationService:
    """
    Sends booking emails through the Resend REST API.

    Delivery is best effort: failures are logged and counted, never raised,
    so a booking is never lost because an email bounced.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
    ):
        self._client = client
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.api_url = api_url or settings.resend_api_url

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def send_email(
        self,
        client: httpx.AsyncClient,
        recipient_kind: str,
        sender: str,
        to: list[str],
        subject: str,
        html: str,
    ) -> bool:
        """
        Post one message to the email API.

        Returns:
            True if the API accepted the message, False otherwise
        """
        try:
            response = await client.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={"from": sender, "to": to, "subject": subject, "html": html},
                timeout=EMAIL_TIMEOUT_SECONDS,
            )
        except httpx.HTTPError as e:
            logger.error("Email request failed", recipient=recipient_kind, error=str(e))
            metrics_collector.record_notification(recipient_kind, "error")
            return False

        if response.is_success:
            try:
                message_id = response.json().get("id")
            except (ValueError, AttributeError):
                # Accepted; the body just carries no message id
                message_id = None
            logger.info("Email sent", recipient=recipient_kind, message_id=message_id)
            metrics_collector.record_notification(recipient_kind, "sent")
            return True

        logger.error(
            "Email API rejected message",
            recipient=recipient_kind,
            status_code=response.status_code,
            body=response.text[:500],
        )
        metrics_collector.record_notification(recipient_kind, "rejected")
        return False

    async def send_booking_notifications(self, details: BookingEmailDetails) -> dict[str, bool]:
        """
        Send the customer confirmation and the admin alert concurrently.

        Returns:
            Delivery outcome per recipient kind; empty when email is not configured
        """
        if not self.enabled:
            logger.warning("Email API key not configured - skipping booking notifications",
                           booking_id=details.booking_id)
            metrics_collector.record_notification("all", "skipped")
            return {}

        customer_subject, customer_html = customer_confirmation(
            details, settings.company_name, settings.support_email
        )
        admin_subject, admin_html = admin_alert(details)

        if self._client is not None:
            results = await self._send_pair(
                self._client, details, customer_subject, customer_html, admin_subject, admin_html
            )
        else:
            async with httpx.AsyncClient() as client:
                results = await self._send_pair(
                    client, details, customer_subject, customer_html, admin_subject, admin_html
                )

        outcome = {}
        for kind, result in zip(("customer", "admin"), results):
            if isinstance(result, Exception):
                logger.error("Email task crashed", recipient=kind, booking_id=details.booking_id,
                             error=repr(result))
                metrics_collector.record_notification(kind, "error")
                outcome[kind] = False
            else:
                outcome[kind] = result
        return outcome

    async def _send_pair(self, client, details, customer_subject, customer_html, admin_subject, admin_html):
        return await asyncio.gather(
            self.send_email(
                client, "customer", settings.customer_email_from,
                [details.customer_email], customer_subject, customer_html,
            ),
            self.send_email(
                client, "admin", settings.admin_email_from,
                list(settings.admin_notification_emails), admin_subject, admin_html,
            ),
            return_exceptions=True,
        )
