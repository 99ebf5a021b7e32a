"""
Structured logging configuration with security focus.

This module provides security-aware log filtering and formatting for the
``cookieseal`` logger tree: seal tokens and secrets are masked before they
reach a handler, and rejected seals are logged as security events.
"""

import json
import logging
import logging.config
import re
import traceback
from datetime import datetime
from typing import Any, Dict, Optional

SECURITY_LOGGER = 'cookieseal.security'

# Seal payloads are long base64url runs, optionally followed by ~<version>
_SEAL_PATTERN = re.compile(r'\b[A-Za-z0-9_-]{40,}(~\d+)?')
_SECRET_PATTERN = re.compile(r'(password|secret|key|token|seal)[\s]*[=:][\s]*[^\s,]+', re.IGNORECASE)


class SecurityLogFilter(logging.Filter):
    """
    Filter to identify and tag security-related log events.

    Adds security context and ensures seals and secrets are not logged.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        security_keywords = [
            'seal', 'signature', 'password', 'tamper', 'expired', 'decrypt',
            'security', 'rejected', 'invalid', 'forged'
        ]

        message_lower = record.getMessage().lower()
        is_security = getattr(record, 'security_event', False) or any(
            keyword in message_lower for keyword in security_keywords
        )

        if is_security:
            record.security_event = True
            if not hasattr(record, 'security_level'):
                record.security_level = self._determine_security_level(message_lower)
        else:
            record.security_event = False
            record.security_level = 'info'

        record.msg = self._sanitize_message(record.getMessage())
        record.args = None

        return True

    def _determine_security_level(self, message_lower: str) -> str:
        """Determine the security severity level"""
        if any(word in message_lower for word in ['forged', 'tamper', 'signature']):
            return 'high'
        elif any(word in message_lower for word in ['rejected', 'invalid', 'expired']):
            return 'medium'
        else:
            return 'low'

    def _sanitize_message(self, message: str) -> str:
        """Sanitize log messages to prevent seal and secret exposure"""
        message = _SECRET_PATTERN.sub(r'\1=****', message)
        return _SEAL_PATTERN.sub('****', message)


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON log formatter with security awareness.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if getattr(record, 'security_event', False):
            log_entry['security'] = {
                'event': True,
                'level': getattr(record, 'security_level', 'info'),
                'category': getattr(record, 'event_type', 'security_event'),
            }

        if getattr(record, 'extra', None):
            log_entry['extra'] = record.extra

        if hasattr(record, 'cookie_name'):
            log_entry['cookie_name'] = record.cookie_name

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': traceback.format_exception(*record.exc_info)
            }

        return json.dumps(log_entry, default=str)


class PlainTextSecurityFormatter(logging.Formatter):
    """
    Plain text formatter with security markers.

    Used when structured logging is disabled but security filtering is still needed.
    """

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if getattr(record, 'security_event', False):
            security_level = getattr(record, 'security_level', 'info').upper()
            formatted = f"[SECURITY:{security_level}] {formatted}"

        return formatted


def setup_security_logging(
    enable_structured_logging: Optional[bool] = None,
    level: Optional[str] = None,
) -> None:
    """
    Set up logging for the ``cookieseal`` logger tree.

    Only the library's own loggers are configured; the host application's
    root logger is left alone.

    Args:
        enable_structured_logging: Use JSON output (defaults to settings)
        level: Log level name (defaults to settings)
    """
    from cookieseal.core.config import settings

    structured_enabled = (
        settings.structured_logging if enable_structured_logging is None else enable_structured_logging
    )
    log_level = (level or settings.log_level).upper()

    logging_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'structured': {
                '()': StructuredFormatter,
            },
            'plain_security': {
                '()': PlainTextSecurityFormatter,
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
        },
        'filters': {
            'security_filter': {
                '()': SecurityLogFilter,
            }
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': log_level,
                'formatter': 'structured' if structured_enabled else 'plain_security',
                'filters': ['security_filter'],
            },
        },
        'loggers': {
            'cookieseal': {
                'level': log_level,
                'handlers': ['console'],
                'propagate': False,
            },
        }
    }

    logging.config.dictConfig(logging_config)

    security_logger = logging.getLogger(SECURITY_LOGGER)
    if structured_enabled:
        security_logger.debug("Structured security logging enabled")
    else:
        security_logger.debug("Security-aware logging enabled")


def log_security_event(
    event_type: str,
    message: str,
    level: str = 'info',
    cookie_name: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log a security event with structured context.

    Args:
        event_type: Type of security event (e.g., 'seal_rejected')
        message: Human-readable message
        level: Security level ('low', 'medium', 'high')
        cookie_name: Optional cookie the event concerns
        extra: Optional additional context
    """
    logger = logging.getLogger(SECURITY_LOGGER)

    log_level = {
        'low': logging.INFO,
        'medium': logging.WARNING,
        'high': logging.WARNING,
    }.get(level, getattr(logging, level.upper(), logging.INFO))

    log_extra = {
        'event_type': event_type,
        'security_level': level,
        'security_event': True,
    }

    if cookie_name:
        log_extra['cookie_name'] = cookie_name
    if extra:
        log_extra['extra'] = extra

    logger.log(log_level, message, extra=log_extra)


def log_seal_rejected(reason: str, cookie_name: Optional[str] = None) -> None:
    """Log an inbound seal that was treated as an empty session"""
    level = 'high' if reason == 'InvalidSignatureError' else 'medium'
    log_security_event(
        'seal_rejected',
        f"Seal rejected ({reason}), starting an empty session",
        level=level,
        cookie_name=cookie_name,
        extra={'reason': reason}
    )
