"""Startup-time helpers for safe config logging."""

from salonpay.common.config import Settings
from salonpay.common.logging import logger

SECRET_MARKERS = ("key", "secret", "password", "token")


def _safe_value(name: str, value):
    """Return a loggable value, hiding anything named like a credential."""

    if value is None or value == "":
        return "<unset>"
    if any(marker in name.lower() for marker in SECRET_MARKERS):
        return "<redacted>"
    return value


def log_startup_config(app_settings: Settings, fields: list[str]) -> None:
    """Log selected settings fields for quick troubleshooting."""

    config = {"service": app_settings.service_name}
    for field in fields:
        config[field] = _safe_value(field, getattr(app_settings, field))
    logger.info("startup_config=%s", config)
