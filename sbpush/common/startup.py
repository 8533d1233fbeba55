"""Startup-time helpers for safe config logging."""

from sbpush.common.config import PushSettings
from sbpush.common.logging import logger

SECRET_MARKERS = ["CONNECTION_STRING", "ENDPOINT", "KEY", "SECRET", "PASSWORD", "TOKEN"]


def _safe_value(name: str, value: object) -> str:
    """Return a printable value with redaction for secret-like setting names."""

    if value is None:
        return "<unset>"
    if any(secret in name.upper() for secret in SECRET_MARKERS):
        return "<redacted>"
    return str(value)


def startup_config(settings: PushSettings, keys: list[str]) -> dict[str, str]:
    """Build the redacted settings snapshot logged at startup."""

    config = {"service": settings.service_name}
    for key in keys:
        config[key] = _safe_value(key, getattr(settings, key.lower(), None))
    return config


def log_startup_config(settings: PushSettings, keys: list[str]) -> None:
    """Log selected startup config keys for quick troubleshooting."""

    logger.info("startup_config=%s", startup_config(settings, keys))
