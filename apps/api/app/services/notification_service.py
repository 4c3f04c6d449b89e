"""Client-facing commission notifications (acceptance / rejection emails).

The status service treats every gateway as fire-and-forget: it catches and
logs whatever a gateway raises. Gateways therefore may raise freely. HTTP
routes wrap the configured gateway in ``BackgroundNotificationGateway`` so the
send happens after the response.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Protocol

import httpx
from fastapi import BackgroundTasks

from app.core.config import Settings

logger = logging.getLogger(__name__)

RESEND_SEND_URL = "https://api.resend.com/emails"
RESEND_TIMEOUT_SECONDS = 10.0

ACCEPTED_SUBJECT = "Commission accepted"
REJECTED_SUBJECT = "Commission status update"


class NotificationGateway(Protocol):
    def notify_accepted(self, email: str, name: str, completion_date: datetime) -> None:
        """Tell the client their commission was accepted."""

    def notify_rejected(self, email: str, name: str, reason: str | None = None) -> None:
        """Tell the client their commission was declined."""


# =============================================================================
# Message rendering
# =============================================================================


def render_acceptance_message(name: str, completion_date: datetime, signature: str) -> str:
    return (
        f"Hello {name},\n\n"
        "Great news! I've accepted your commission request and will be working on it.\n\n"
        f"Estimated Completion Date: {completion_date.strftime('%Y-%m-%d')}\n\n"
        "I'll reach out if I have any questions about your request. "
        "Thanks for your patience!\n\n"
        f"Best regards,\n{signature}\n"
    )


def render_rejection_message(name: str, reason: str | None, signature: str) -> str:
    lines = [
        f"Hello {name},",
        "",
        "Thank you for your commission request. Unfortunately, "
        "I'm unable to accept it at this time.",
        "",
    ]
    if reason:
        lines.extend([f"Reason: {reason}", ""])
    lines.extend(
        [
            "Feel free to reach out again in the future. I appreciate your interest!",
            "",
            f"Best regards,\n{signature}",
        ]
    )
    return "\n".join(lines) + "\n"


# =============================================================================
# Gateways
# =============================================================================


class LogNotificationGateway:
    """Development gateway: writes the rendered email to the log."""

    key = "log"

    def __init__(self, signature: str = "Your Artist") -> None:
        self.signature = signature

    def notify_accepted(self, email: str, name: str, completion_date: datetime) -> None:
        message = render_acceptance_message(name, completion_date, self.signature)
        logger.info("[EMAIL] Acceptance notification (%s):\n%s", ACCEPTED_SUBJECT, message)

    def notify_rejected(self, email: str, name: str, reason: str | None = None) -> None:
        message = render_rejection_message(name, reason, self.signature)
        logger.info("[EMAIL] Rejection notification (%s):\n%s", REJECTED_SUBJECT, message)


class ResendNotificationGateway:
    """Sends notifications through the Resend API."""

    key = "resend"

    def __init__(
        self,
        api_key: str,
        from_email: str,
        signature: str = "Your Artist",
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.from_email = from_email
        self.signature = signature
        self._client = client

    def _send(self, to_email: str, subject: str, text: str) -> None:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "from": self.from_email,
            "to": [to_email],
            "subject": subject,
            "text": text,
        }
        if self._client is not None:
            response = self._client.post(RESEND_SEND_URL, headers=headers, json=payload)
        else:
            with httpx.Client(timeout=RESEND_TIMEOUT_SECONDS) as client:
                response = client.post(RESEND_SEND_URL, headers=headers, json=payload)
        response.raise_for_status()
        logger.info("Resend accepted notification (status=%s)", response.status_code)

    def notify_accepted(self, email: str, name: str, completion_date: datetime) -> None:
        self._send(
            email,
            ACCEPTED_SUBJECT,
            render_acceptance_message(name, completion_date, self.signature),
        )

    def notify_rejected(self, email: str, name: str, reason: str | None = None) -> None:
        self._send(
            email,
            REJECTED_SUBJECT,
            render_rejection_message(name, reason, self.signature),
        )


def _send_logged(send: Callable[..., None], kind: str, *args: Any) -> None:
    try:
        send(*args)
    except Exception:
        logger.exception("Commission %s notification failed after response", kind)


class BackgroundNotificationGateway:
    """
    Runs another gateway's sends after the HTTP response is sent.

    Failures are logged by the task itself; the caller never sees them.
    """

    key = "background"

    def __init__(self, gateway: NotificationGateway, background_tasks: BackgroundTasks) -> None:
        self.gateway = gateway
        self.background_tasks = background_tasks

    def notify_accepted(self, email: str, name: str, completion_date: datetime) -> None:
        self.background_tasks.add_task(
            _send_logged, self.gateway.notify_accepted, "accepted", email, name, completion_date
        )

    def notify_rejected(self, email: str, name: str, reason: str | None = None) -> None:
        self.background_tasks.add_task(
            _send_logged, self.gateway.notify_rejected, "rejected", email, name, reason
        )


def build_notification_gateway(settings: Settings) -> NotificationGateway:
    """Pick the gateway for the configured environment."""
    if settings.RESEND_API_KEY:
        return ResendNotificationGateway(
            api_key=settings.RESEND_API_KEY,
            from_email=settings.EMAIL_FROM,
            signature=settings.ARTIST_NAME,
        )
    return LogNotificationGateway(signature=settings.ARTIST_NAME)
