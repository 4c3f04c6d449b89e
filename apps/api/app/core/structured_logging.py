"""Structured logging helpers (PII-safe: never client names or emails)."""

import logging
from typing import Any


def build_log_context(
    *,
    commission_id: int | None = None,
    status: str | None = None,
    previous_status: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict."""
    context: dict[str, Any] = {}
    if commission_id is not None:
        context["commission_id"] = commission_id
    if status:
        context["status"] = status
    if previous_status:
        context["previous_status"] = previous_status
    return context


def configure_logging(level: str = "INFO") -> None:
    """Root logger setup for the API process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
