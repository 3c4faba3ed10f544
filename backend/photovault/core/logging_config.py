"""Logging setup for PhotoVault.

Every record gets a ``request_id`` attribute (``-`` outside a request) from
the context variable the request middleware sets, so both output formats
can show it. Credentials that tend to end up in messages here (bearer
tokens, presigned URL signatures, AWS key ids, bcrypt hashes) are masked
before any handler sees them.
"""

import contextvars
import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Optional


request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s: %(message)s"

_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "botocore", "boto3", "s3transfer", "passlib")


class _RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("") or "-"
        return True


class _JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Attributes passed via ``extra=`` become top-level keys:
    ``logger.info("Photos moved", extra={"moved": 3})`` -> ``{..., "moved": 3}``.
    """

    _STANDARD_ATTRS = frozenset(
        logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
    ) | {"request_id", "message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if getattr(record, "request_id", "-") != "-":
            entry["request_id"] = record.request_id

        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS and key not in entry
        )

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


_REDACTED = "***REDACTED***"

# Group 1, when present, is a prefix kept in front of the mask.
_SECRET_PATTERNS = [
    re.compile(r'(?i)(bearer\s+)[a-zA-Z0-9._\-]{20,}'),
    re.compile(r'(?i)(X-Amz-(?:Signature|Credential|Security-Token)=)[^&\s"\']+'),
    re.compile(r'\bAKIA[0-9A-Z]{16}\b'),
    re.compile(r'\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}'),
    re.compile(
        r'(?i)((?:aws_secret_access_key|secret|password|token|authorization)[=:]\s*)[^\s,\'"&]{6,}'
    ),
]


def redact(text: str) -> str:
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(lambda m: (m.group(1) if m.lastindex else "") + _REDACTED, text)
    return text


class _SecretFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            record.msg = record.getMessage()
            record.args = None
        record.msg = redact(str(record.msg))
        if record.exc_text:
            record.exc_text = redact(record.exc_text)
        return True


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Install the PhotoVault handler on the root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Defaults to INFO.
        log_format: ``"json"`` (default) or ``"text"``.
    """
    level = (log_level or "INFO").upper()
    fmt = (log_format or "json").lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_RequestIdFilter())
    handler.addFilter(_SecretFilter())
    handler.setFormatter(
        _JsonFormatter() if fmt == "json"
        else logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging configured", extra={"level": level, "format": fmt})
