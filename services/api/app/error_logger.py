"""Error logging with an optional external reporter.

Everything is logged through the standard `logging` module. On top of that a
single ErrorReporter receives exceptions and warnings:

- NullReporter (default): drops everything
- SentryReporter: forwards to Sentry; only used when SENTRY_DSN is set and the
  app runs in production, and only if `sentry-sdk` is installed

Call init_error_logger() once at startup (see app.main lifespan).
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from app.settings import Settings, get_settings

logger = logging.getLogger("uvicorn.error")


class ErrorReporter(Protocol):
    """Interface for external error reporting backends."""

    def capture_exception(self, error: BaseException, *, component: str, extra: dict[str, Any]) -> None: ...

    def capture_message(self, message: str, *, level: str, component: str, extra: dict[str, Any]) -> None: ...

    def set_user(self, user: dict[str, Any] | None) -> None: ...


class NullReporter:
    """Reporter that discards everything."""

    def capture_exception(self, error: BaseException, *, component: str, extra: dict[str, Any]) -> None:
        return None

    def capture_message(self, message: str, *, level: str, component: str, extra: dict[str, Any]) -> None:
        return None

    def set_user(self, user: dict[str, Any] | None) -> None:
        return None


class SentryReporter:
    """Reporter backed by sentry-sdk."""

    def __init__(self, dsn: str, *, environment: str, traces_sample_rate: float = 1.0):
        import sentry_sdk

        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            traces_sample_rate=traces_sample_rate,
        )
        self._sdk = sentry_sdk

    def capture_exception(self, error: BaseException, *, component: str, extra: dict[str, Any]) -> None:
        with self._sdk.new_scope() as scope:
            scope.set_tag("component", component)
            for key, value in extra.items():
                scope.set_extra(key, value)
            scope.capture_exception(error)

    def capture_message(self, message: str, *, level: str, component: str, extra: dict[str, Any]) -> None:
        with self._sdk.new_scope() as scope:
            scope.set_tag("component", component)
            for key, value in extra.items():
                scope.set_extra(key, value)
            scope.capture_message(message, level=level)

    def set_user(self, user: dict[str, Any] | None) -> None:
        self._sdk.set_user(user)


_reporter: ErrorReporter = NullReporter()
_initialized = False


def init_error_logger(
    settings: Settings | None = None,
    *,
    reporter: ErrorReporter | None = None,
) -> ErrorReporter:
    """Configure the active reporter. Safe to call more than once.

    Args:
        settings: App settings (defaults to get_settings()).
        reporter: Explicit reporter; overrides settings-based selection.

    Returns:
        The active reporter.
    """
    global _reporter, _initialized

    if reporter is not None:
        _reporter = reporter
        _initialized = True
        return _reporter

    if _initialized:
        return _reporter

    settings = settings or get_settings()
    if settings.sentry_dsn and settings.is_production:
        try:
            _reporter = SentryReporter(
                settings.sentry_dsn,
                environment=settings.environment,
                traces_sample_rate=settings.sentry_traces_sample_rate,
            )
            logger.info("Sentry error reporting initialized")
        except ImportError:
            logger.warning("SENTRY_DSN is set but sentry-sdk is not installed; external reporting disabled")
    elif settings.sentry_dsn:
        logger.info("SENTRY_DSN is set but environment is not production; external reporting disabled")
    else:
        logger.info("Error logger initialized (logging only)")

    _initialized = True
    return _reporter


def reset_error_logger() -> None:
    """Restore the default no-op reporter (for tests)."""
    global _reporter, _initialized
    _reporter = NullReporter()
    _initialized = False


def get_error_reporter() -> ErrorReporter:
    return _reporter


def is_error_reporting_enabled() -> bool:
    """True when an external reporter is active."""
    return not isinstance(_reporter, NullReporter)


def log_error(
    error: BaseException,
    *,
    component: str = "Unknown",
    extra: dict[str, Any] | None = None,
) -> None:
    """Log an exception and forward it to the reporter."""
    extra = extra or {}
    logger.error(f"[{component}] {error}", exc_info=error)
    if extra:
        logger.error(f"[{component}] context: {extra}")
    _reporter.capture_exception(error, component=component, extra=extra)


def log_warning(
    message: str,
    *,
    component: str = "Unknown",
    extra: dict[str, Any] | None = None,
) -> None:
    """Log a non-fatal issue and forward it to the reporter."""
    extra = extra or {}
    logger.warning(f"[{component}] {message}")
    _reporter.capture_message(message, level="warning", component=component, extra=extra)


def log_info(
    message: str,
    *,
    component: str = "Unknown",
    extra: dict[str, Any] | None = None,
) -> None:
    """Log an informational event (never forwarded)."""
    if extra:
        logger.info(f"[{component}] {message} {extra}")
    else:
        logger.info(f"[{component}] {message}")


def set_user_context(user: dict[str, Any]) -> None:
    _reporter.set_user(user)


def clear_user_context() -> None:
    _reporter.set_user(None)
