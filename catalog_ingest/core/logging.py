"""
Structured Logging Configuration

structlog output for the seeder jobs. Logs go to stderr so the reset
confirmation prompt on stdout stays readable, and the YouTube API key is
scrubbed from every event because httpx error messages carry the full
request URL.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from ..config import Settings, get_settings

REDACTED = "***"

# Libraries that log request URLs (and with them the API key) at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google.auth", "urllib3")


def resolve_log_level(settings: Settings, override: Optional[str] = None) -> int:
    """Pick the numeric level from an override, LOG_LEVEL or DEBUG."""
    name = override or settings.log_level or ("DEBUG" if settings.debug else "INFO")
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


class SecretRedactor:
    """Processor replacing known secrets in any string value of an event."""

    def __init__(self, *secrets: Optional[str]):
        self.secrets = [s for s in secrets if s]

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, str):
            for secret in self.secrets:
                value = value.replace(secret, REDACTED)
        return value

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if not self.secrets:
            return event_dict
        return {key: self._scrub(value) for key, value in event_dict.items()}


def setup_logging(
    settings: Optional[Settings] = None,
    log_level: Optional[str] = None,
    job: Optional[str] = None,
):
    """
    Configure structured logging for one seeder process.

    Args:
        settings: Run configuration; the cached settings when omitted
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        job: Job name bound to every event of the run
    """
    settings = settings or get_settings()
    level = resolve_log_level(settings, log_level)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    redactor = SecretRedactor(settings.youtube_api_key)

    if settings.environment == "development":
        # Pretty console output for dev
        processors = shared_processors + [
            redactor,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]
    else:
        # JSON output; tracebacks are rendered first so they get redacted too
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            redactor,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    if job:
        structlog.contextvars.bind_contextvars(job=job)


def get_logger(name: str = "catalog_ingest") -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
