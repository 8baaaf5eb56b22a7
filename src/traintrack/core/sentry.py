"""Sentry error tracking configuration and initialization."""

import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from traintrack.core.logging import get_logger

logger = get_logger(__name__)

_sentry_initialized = False


def init_sentry() -> bool:
    """
    Initialize Sentry SDK for error tracking.

    Only initializes when SENTRY_DSN is set and looks like a real DSN, so local
    development and CI run without Sentry. Safe to call more than once.

    Configuration:
    - No performance monitoring
    - No PII and no SQL in payloads (employee data stays out of Sentry)
    - Logging integration off; structlog already writes the logs

    Returns:
        True when Sentry is active after the call
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    sentry_dsn = (os.getenv("SENTRY_DSN") or "").strip()
    if not sentry_dsn:
        logger.info("sentry.disabled", message="Sentry DSN not found, error tracking disabled")
        return False

    if not sentry_dsn.startswith(("https://", "http://")):
        logger.info(
            "sentry.disabled",
            message="Sentry DSN looks like a placeholder, error tracking disabled",
        )
        return False

    environment = os.getenv("ENVIRONMENT", "development")

    try:
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),
            ],
            before_send=filter_sensitive_data,
        )
    except BadDsn as exc:
        logger.warning(
            "sentry.init_failed",
            message="Invalid Sentry DSN, error tracking disabled",
            error=str(exc),
        )
        return False

    _sentry_initialized = True
    logger.info("sentry.initialized", environment=environment)
    return True


def filter_sensitive_data(event: dict, hint: dict) -> dict:
    """Drop SQL-looking extras and breadcrumbs from Sentry events."""
    extra = event.get("extra")
    if isinstance(extra, dict):
        event["extra"] = {
            key: value
            for key, value in extra.items()
            if "sql" not in str(key).lower() and "sql" not in str(value).lower()
        }

    breadcrumbs = event.get("breadcrumbs")
    if isinstance(breadcrumbs, dict) and isinstance(breadcrumbs.get("values"), list):
        breadcrumbs["values"] = [
            b for b in breadcrumbs["values"] if not _is_sql_breadcrumb(b)
        ]
    elif isinstance(breadcrumbs, list):
        event["breadcrumbs"] = [b for b in breadcrumbs if not _is_sql_breadcrumb(b)]

    return event


def _is_sql_breadcrumb(breadcrumb) -> bool:
    if isinstance(breadcrumb, dict):
        text = f"{breadcrumb.get('category', '')} {breadcrumb.get('message', '')}"
    else:
        text = str(breadcrumb)
    return "sql" in text.lower()
