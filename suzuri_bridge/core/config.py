import os
from dotenv import load_dotenv

load_dotenv(override=True)


class Config:
    """
    Base configuration for the SUZURI bridge.
    Everything is read from the environment (or a local .env file).
    Values already present in Flask's app.config win over these defaults.
    """
    # SUZURI API settings
    SUZURI_API_KEY = os.getenv('SUZURI_API_KEY')
    SUZURI_API_BASE_URL = os.getenv('SUZURI_API_BASE_URL', 'https://suzuri.jp/api/v1')
    SUZURI_TIMEOUT = float(os.getenv('SUZURI_TIMEOUT', '60'))

    # Processed images written by /api/upload, picked up by /api/products
    UPLOAD_TMP_DIR = os.getenv('UPLOAD_TMP_DIR', os.path.join(os.getcwd(), 'tmp'))

    # CORS - comma separated list, or * for any origin
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Port for local server
    PORT = int(os.getenv('PORT', '5000'))


CONFIG_KEYS = [
    'SUZURI_API_KEY',
    'SUZURI_API_BASE_URL',
    'SUZURI_TIMEOUT',
    'UPLOAD_TMP_DIR',
    'CORS_ORIGINS',
    'LOG_LEVEL',
    'PORT',
]


def get_config_value(key, default=None):
    """Resolve a setting: Flask app config first, then Config, then default"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    return default if val is None else val
