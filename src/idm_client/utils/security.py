"""Security utilities for sanitization and secure logging.

This module keeps credentials out of log output:
- Log sanitization and secure logging setup
- Pattern matching for sensitive data
- Header and URL redaction for request logging
"""

import copy
import logging
import re
import sys
from typing import Any, Dict, Optional

from ..config.settings import Settings

# Patterns for sensitive data detection
SENSITIVE_PATTERNS = {
    "jwt_token": re.compile(r"eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+"),
    "bearer_token": re.compile(r"Bearer\s+[A-Za-z0-9_.-]+", re.IGNORECASE),
    "basic_auth": re.compile(r"Basic\s+[A-Za-z0-9+/=]+", re.IGNORECASE),
}

# Headers that should never be logged
SENSITIVE_HEADERS = {
    "authorization",
    "x-api-key",
    "x-auth-token",
    "cookie",
    "set-cookie",
    "x-access-token",
    "x-refresh-token",
}

SENSITIVE_URL_PARAMS = (
    "access_token",
    "client_secret",
    "password",
    "token",
    "secret",
)


def sanitize_string(value: str, partial: bool = False) -> str:
    """Sanitize a string containing potential sensitive data.

    Redacts JWTs and authorization header values from strings.

    :param value: String to sanitize
    :type value: str
    :param partial: If True, show length instead of full redaction
    :type partial: bool
    :return: Sanitized string with sensitive data redacted
    :rtype: str
    """
    if not value:
        return value
    for pattern_name, pattern in SENSITIVE_PATTERNS.items():
        if pattern.search(value):
            if partial and len(value) > 10:
                return f"<{pattern_name}:length={len(value)}>"
            return f"<{pattern_name}:REDACTED>"
    return value


def sanitize_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    """Sanitize HTTP headers for logging.

    :param headers: Dictionary of HTTP headers
    :type headers: Dict[str, Any]
    :return: Sanitized copy of the headers
    :rtype: Dict[str, Any]
    """
    if not headers:
        return headers
    sanitized = copy.deepcopy(dict(headers))
    for key, value in sanitized.items():
        if key.lower() in SENSITIVE_HEADERS:
            if isinstance(value, str) and len(value) > 0:
                sanitized[key] = f"<REDACTED:length={len(value)}>"
            else:
                sanitized[key] = "<REDACTED>"
        elif isinstance(value, str):
            sanitized[key] = sanitize_string(value)
    return sanitized


def sanitize_url(url: str) -> str:
    """Redact credential-bearing query parameters from a URL.

    :param url: URL to sanitize
    :type url: str
    :return: URL with sensitive parameter values replaced
    :rtype: str
    """
    if not url:
        return url
    for param in SENSITIVE_URL_PARAMS:
        url = re.sub(
            rf"([?&]{param}=)[^&\s]+", r"\1<REDACTED>", url, flags=re.IGNORECASE
        )
    return url


class SanitizingFormatter(logging.Formatter):
    """Formatter that automatically sanitizes sensitive data.

    Formats the record message with its arguments first, then redacts
    anything that looks like a credential.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.args:
            try:
                record.msg = sanitize_string(record.msg % record.args)
                record.args = None
            except (TypeError, ValueError):
                record.msg = sanitize_string(str(record.msg))
                record.args = tuple(
                    sanitize_string(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )
        else:
            record.msg = sanitize_string(str(record.msg))
        return super().format(record)


_LOGGING_CONFIGURED = False


def setup_secure_logging(level: Optional[str] = None) -> None:
    """Set up logging with automatic sanitization.

    Installs a single stdout handler using :class:`SanitizingFormatter`
    on the root logger. Repeated calls are ignored.

    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
        defaults to ``Settings().log_level``, read from ``LOG_LEVEL``
    :type level: Optional[str]
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping duplicate setup"
        )
        return

    if level is None:
        level = Settings().log_level

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        SanitizingFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )

    # httpx logs full request lines at INFO; keep them at our level or quieter
    logging.getLogger("httpx").setLevel(
        max(logging.WARNING, getattr(logging, level.upper()))
    )

    _LOGGING_CONFIGURED = True
