"""Structured JSON logging with request context fields.

Client secrets and API keys are scrubbed from every message before it is
written.
"""

import logging
import re
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter

from salonpay.common.config import settings


request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")
checkout_mode_ctx: ContextVar[str] = ContextVar("checkout_mode", default="")

SECRET_PATTERN = re.compile(r"\b(?:(?:pi|seti)_\w+?_secret_\w+|(?:sk|rk)_(?:test|live)_\w+)")


def redact_secrets(text: str) -> str:
    """Replace client secrets and secret/restricted API keys with a marker."""

    return SECRET_PATTERN.sub("<redacted>", text)


class ContextFilter(logging.Filter):
    """Inject service and correlation identifiers into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = settings.service_name
        record.request_id = request_id_ctx.get()
        record.checkout_mode = checkout_mode_ctx.get()
        return True


class SecretRedactionFilter(logging.Filter):
    """Render the message once, with secrets scrubbed."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_secrets(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging() -> None:
    """Configure root logger once per process."""

    handler = logging.StreamHandler(sys.stdout)
    context_filter = ContextFilter()
    handler.addFilter(context_filter)
    handler.addFilter(SecretRedactionFilter())
    formatter = JsonFormatter(
        "%(asctime)s %(levelname)s %(service_name)s %(request_id)s %(checkout_mode)s %(message)s"
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level)
    root.addFilter(context_filter)


logger = logging.getLogger("salonpay")
