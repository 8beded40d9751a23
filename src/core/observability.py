"""Error reporting through Sentry (or a Sentry-compatible GlitchTip server).

Nothing is sent unless ``GLITCHTIP_DSN`` is set; the capture helpers are safe
to call either way.
"""
from typing import Any

import sentry_sdk
import structlog
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from src.config.settings import settings

logger = structlog.get_logger(__name__)

# Substrings of errors raised when a client or proxy drops the socket
DROPPED_CONNECTION_MARKERS = ("connection refused", "connection reset", "broken pipe")


def init_observability() -> None:
    if not settings.GLITCHTIP_DSN:
        logger.info("observability_disabled", reason="GLITCHTIP_DSN not set")
        return

    full_sampling = settings.is_development
    sentry_sdk.init(
        dsn=settings.GLITCHTIP_DSN,
        environment=settings.APP_ENV,
        release=f"trainerdesk-api@{settings.APP_VERSION}",
        traces_sample_rate=1.0 if full_sampling else settings.GLITCHTIP_TRACES_SAMPLE_RATE,
        profiles_sample_rate=1.0 if full_sampling else settings.GLITCHTIP_PROFILES_SAMPLE_RATE,
        send_default_pii=False,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        before_send=drop_connection_noise,
    )
    logger.info("observability_initialized", environment=settings.APP_ENV, release=settings.APP_VERSION)


def drop_connection_noise(event: dict, hint: dict) -> dict | None:
    """Discard events caused by dropped client connections."""
    exc_info = hint.get("exc_info")
    if exc_info:
        message = str(exc_info[1]).lower()
        if any(marker in message for marker in DROPPED_CONNECTION_MARKERS):
            return None
    return event


def set_user_context(user_id: str, email: str | None = None) -> None:
    """Tag subsequent events with the signed-in trainer."""
    sentry_sdk.set_user({"id": user_id, "email": email})


def capture_exception(
    exception: Exception,
    extra: dict[str, Any] | None = None,
    tags: dict[str, str] | None = None,
) -> str | None:
    """Report a handled exception with extra context; returns the event id."""
    with sentry_sdk.new_scope() as scope:
        for key, value in (extra or {}).items():
            scope.set_extra(key, value)
        for key, value in (tags or {}).items():
            scope.set_tag(key, value)
        return scope.capture_exception(exception)
