"""Log sanitization and secure logging setup.

The client sends a password on every login and carries a session cookie
on every request. This module keeps both out of log output:

- Pattern based redaction of strings
- Header and nested-dictionary sanitization for request logging
- A logging formatter that sanitizes every record
"""

import copy
import logging
import re
import sys
from typing import Any, Dict, List, Optional

# Patterns for sensitive data detection
SENSITIVE_PATTERNS = {
    "session_cookie": re.compile(r"(sessionid|csrftoken)=[^;\s]+", re.IGNORECASE),
    "password_field": re.compile(r"['\"]?password['\"]?\s*[:=]\s*\S+", re.IGNORECASE),
    "bearer_token": re.compile(r"Bearer\s+[A-Za-z0-9_-]+", re.IGNORECASE),
    "basic_auth": re.compile(r"Basic\s+[A-Za-z0-9+/=]+", re.IGNORECASE),
}

# Headers that should never be logged
SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "set-cookie",
    "x-csrftoken",
    "x-csrf-token",
}

DEFAULT_SENSITIVE_KEYS = {"password", "token", "secret", "cookie", "session"}


def sanitize_string(value: str, partial: bool = False) -> str:
    """Sanitize a string containing potential sensitive data.

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
            value = pattern.sub(f"<{pattern_name}:REDACTED>", value)
    return value


def sanitize_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    """Sanitize HTTP headers for logging.

    :param headers: Dictionary of HTTP headers
    :type headers: Dict[str, Any]
    :return: Sanitized headers dictionary
    :rtype: Dict[str, Any]
    """
    if not headers:
        return headers
    sanitized = dict(headers)
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            if isinstance(value, str) and len(value) > 0:
                sanitized[key] = f"<REDACTED:length={len(value)}>"
            else:
                sanitized[key] = "<REDACTED>"
        elif isinstance(value, str):
            sanitized[key] = sanitize_string(value)
    return sanitized


def safe_log_dict(
    data: Optional[Dict[str, Any]], sanitize_keys: Optional[List[str]] = None
) -> Optional[Dict[str, Any]]:
    """Create a safe version of a dictionary for logging.

    Recursively replaces values whose key looks sensitive (password,
    token, session, ...) and sanitizes remaining string values.

    :param data: Dictionary to sanitize
    :type data: Optional[Dict[str, Any]]
    :param sanitize_keys: Additional keys to sanitize beyond defaults
    :type sanitize_keys: Optional[List[str]]
    :return: Sanitized copy safe for logging
    :rtype: Optional[Dict[str, Any]]
    """
    if not data:
        return data
    keys = set(DEFAULT_SENSITIVE_KEYS)
    if sanitize_keys:
        keys.update(k.lower() for k in sanitize_keys)
    sanitized = copy.deepcopy(data)

    def _sanitize_nested(obj: Any) -> Any:
        if isinstance(obj, dict):
            for key, value in obj.items():
                lower_key = str(key).lower()
                if any(sensitive in lower_key for sensitive in keys):
                    obj[key] = "<REDACTED>"
                elif isinstance(value, str):
                    obj[key] = sanitize_string(value)
                elif isinstance(value, (dict, list)):
                    obj[key] = _sanitize_nested(value)
        elif isinstance(obj, list):
            return [_sanitize_nested(item) for item in obj]
        return obj

    return _sanitize_nested(sanitized)


class SanitizingFormatter(logging.Formatter):
    """Formatter that automatically sanitizes sensitive data.

    The message is rendered with its arguments first and the resulting
    text is sanitized, so secrets passed as ``%s`` arguments are caught.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with automatic sanitization.

        :param record: Log record to format
        :type record: logging.LogRecord
        :return: Sanitized log message
        :rtype: str
        """
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


# Global flag to track if logging has been set up
_LOGGING_CONFIGURED = False


def setup_secure_logging(level: str = "INFO") -> None:
    """Set up logging with automatic sanitization.

    Installs a stdout handler with :class:`SanitizingFormatter` on the
    root logger. Calling it again is a no-op.

    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    :type level: str
    :return: None
    :rtype: None
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping duplicate setup"
        )
        return

    formatter = SanitizingFormatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
