"""
SUZURI Bridge Core
==================

Configuration, errors, logging and image handling shared by the modules.
"""

from .config import Config, get_config_value
from .errors import BridgeError, ValidationError, ProcessingError, UpstreamError
from .logging_service import LoggingService

__all__ = [
    'Config', 'get_config_value',
    'BridgeError', 'ValidationError', 'ProcessingError', 'UpstreamError',
    'LoggingService',
]
