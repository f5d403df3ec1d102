"""
identity_gate.observability.logging

Structured logging for the identity gate.

Responsibilities:
- Configure `structlog` (JSON for aggregators, console rendering for local runs).
- Keep bearer tokens out of log output, whether passed as a field or embedded in a message.
- Bind the authenticated subject into the request's logging context.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

import structlog
from structlog.typing import Processor

SENSITIVE_KEYS = frozenset({"authorization", "token", "access_token", "bearer_token"})
REDACTED = "[redacted]"

# A `Bearer <credential>` pair, or a bare compact JWS (three base64url segments).
_TOKEN_PATTERN = re.compile(r"(?i:bearer)\s+\S+|\beyJ[\w-]*\.[\w-]+\.[\w-]*")


def build_processors(*, service_name: str, json_logs: bool) -> list[Processor]:
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_name(service_name),
        redact_sensitive,
        structlog.processors.dict_tracebacks,
        renderer,
    ]


def configure_logging(*, service_name: str, level: str, json_logs: bool = True) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    structlog.configure(
        processors=build_processors(service_name=service_name, json_logs=json_logs),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def redact_sensitive(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Replace credential fields outright and scrub tokens out of free-text values.

    Error strings from PyJWT/httpx can echo the header they failed on, so string values
    are scanned as well as the known credential keys.
    """

    for key, value in event_dict.items():
        if key in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        elif isinstance(value, str):
            event_dict[key] = _TOKEN_PATTERN.sub(REDACTED, value)
    return event_dict


def bind_subject(subject: str) -> None:
    structlog.contextvars.bind_contextvars(subject=subject)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Request metadata is bound by `observability.middleware`, which also clears the
# context (including the subject bound here) when the request finishes.
