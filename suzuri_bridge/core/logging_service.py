"""
Centralized logging service for the SUZURI bridge.
Provides source-tagged logging with credential redaction on top of the
standard logging module. The bridge keeps no database, so entries go to
whatever handlers the host process configures (stderr by default).
"""

import re
import json
import logging
import traceback
from flask import request, has_request_context

_logger = logging.getLogger('suzuri_bridge')

_BEARER_RE = re.compile(r'(Bearer\s+)[A-Za-z0-9._\-]+', re.IGNORECASE)
_DATA_URI_RE = re.compile(r'(data:[\w/+.-]+;base64,)[A-Za-z0-9+/=]+')
_SECRET_KEYS = {'authorization', 'api_key', 'apikey', 'suzuri_api_key', 'token', 'texture'}


def redact(value):
    """Strip bearer tokens and embedded image data from a log payload"""
    if isinstance(value, dict):
        cleaned = {}
        for key, item in value.items():
            if str(key).lower() in _SECRET_KEYS and isinstance(item, str):
                cleaned[key] = _redact_string(item) if item.startswith('data:') else '[REDACTED]'
            else:
                cleaned[key] = redact(item)
        return cleaned
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    if isinstance(value, str):
        return _redact_string(value)
    return value


def _redact_string(text):
    text = _BEARER_RE.sub(r'\1[REDACTED]', text)
    return _DATA_URI_RE.sub(r'\1[...]', text)


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def configure(level='INFO'):
        """Attach a stream handler once and set the bridge log level"""
        if not _logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                '[%(asctime)s] [%(levelname)s] %(message)s'
            ))
            _logger.addHandler(handler)
        _logger.setLevel(str(level).upper())

    @staticmethod
    def _get_request_path():
        if not has_request_context():
            return None
        try:
            return f"{request.method} {request.path}"
        except Exception:
            return None

    @staticmethod
    def log(level, source, message, details=None):
        """
        Log a message

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (suzuri, products, catalog, etc.)
            message (str): Main log message
            details (str/dict): Additional details, redacted before output
        """
        line = f"[{source}] {message}"

        request_path = LoggingService._get_request_path()
        if request_path:
            line = f"{line} ({request_path})"

        if details is not None:
            details = redact(details)
            if isinstance(details, (dict, list)):
                details = json.dumps(details, indent=2, default=str)
            line = f"{line}\nDetails: {details}"

        _logger.log(getattr(logging, level.upper(), logging.INFO), line)

    @staticmethod
    def debug(source, message, details=None):
        """Log debug message"""
        LoggingService.log('DEBUG', source, message, details)

    @staticmethod
    def info(source, message, details=None):
        """Log info message"""
        LoggingService.log('INFO', source, message, details)

    @staticmethod
    def warning(source, message, details=None):
        """Log warning message"""
        LoggingService.log('WARNING', source, message, details)

    @staticmethod
    def error(source, message, details=None):
        """Log error message"""
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def critical(source, message, details=None):
        """Log critical message"""
        LoggingService.log('CRITICAL', source, message, details)

    @staticmethod
    def log_api_call(source, endpoint, method='GET', status_code=200, details=None):
        """Log API calls"""
        message = f"API {method} {endpoint} - Status: {status_code}"
        level = 'INFO' if 200 <= status_code < 400 else 'WARNING' if status_code < 500 else 'ERROR'
        LoggingService.log(level, source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

