"""
SUZURI Bridge
=============

A small Flask gateway in front of the SUZURI print-on-demand API:
- Create a material + product from an uploaded image (front, or front/back)
- Return complete, browsable product and variant URLs
- List item types and a user's existing products

Usage:
    from flask import Flask
    from suzuri_bridge import SuzuriBridge

    app = Flask(__name__)
    SuzuriBridge(app)

Or simply:
    from suzuri_bridge import create_app
    app = create_app()
"""

__version__ = '0.1.0'

from flask import Flask, jsonify
from flask_cors import CORS

from .core.config import Config, CONFIG_KEYS
from .core.errors import BridgeError
from .core.logging_service import LoggingService
from .modules.suzuri import SuzuriService
from .modules.products.orchestrator import ProductOrchestrator

DEFAULT_FEATURES = {
    'products': True,
    'catalog': True,
    'uploads': True,
}


class SuzuriBridge:
    """Flask extension wiring the SUZURI client, orchestrator and blueprints"""

    def __init__(self, app=None, config=None, service=None):
        self._config = config or {}
        self._registered_modules = []
        self.service = service
        self.orchestrator = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        for key in CONFIG_KEYS:
            app.config.setdefault(key, getattr(Config, key))

        LoggingService.configure(app.config['LOG_LEVEL'])

        # One client for the whole process, shared by every request
        if self.service is None:
            self.service = SuzuriService(
                api_key=app.config['SUZURI_API_KEY'],
                base_url=app.config['SUZURI_API_BASE_URL'],
                timeout=app.config['SUZURI_TIMEOUT'],
            )
        if not app.config['SUZURI_API_KEY'] and not app.config.get('TESTING'):
            LoggingService.warning('bridge', 'SUZURI_API_KEY is not set; upstream calls will fail')

        self.orchestrator = ProductOrchestrator(
            self.service, upload_dir=app.config['UPLOAD_TMP_DIR']
        )

        self._setup_cors(app)
        self._register_modules(app)
        self._register_error_handlers(app)

        app.extensions['suzuri_bridge'] = self
        LoggingService.debug('bridge', 'SUZURI bridge initialised', self.service.describe())

    def _setup_cors(self, app):
        origins = app.config['CORS_ORIGINS']
        if isinstance(origins, str) and origins != '*':
            origins = [origin.strip() for origin in origins.split(',') if origin.strip()]

        CORS(
            app,
            resources={r"/api/*": {"origins": origins}},
            methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
            allow_headers=['Content-Type', 'Authorization', 'X-Requested-With'],
            max_age=86400,
            supports_credentials=True,
        )

    def _register_modules(self, app):
        features = dict(DEFAULT_FEATURES)
        features.update(self._config.get('features', {}))

        if features['products']:
            from .modules.products import products_bp
            app.register_blueprint(products_bp)
            self._registered_modules.append('products')

        if features['catalog']:
            from .modules.catalog import catalog_bp
            app.register_blueprint(catalog_bp)
            self._registered_modules.append('catalog')

        if features['uploads']:
            from .modules.uploads import uploads_bp
            app.register_blueprint(uploads_bp)
            self._registered_modules.append('uploads')

    def _register_error_handlers(self, app):
        @app.errorhandler(BridgeError)
        def handle_bridge_error(error):
            if error.status_code >= 500:
                LoggingService.error('bridge', f"Unhandled {type(error).__name__}: {error}")
            return jsonify(error.to_dict()), error.status_code

    def get_registered_modules(self):
        return list(self._registered_modules)


def create_app(config=None, service=None):
    """Application factory used by app.py and `flask --app suzuri_bridge run`"""
    app = Flask(__name__)
    if config:
        app.config.from_mapping(config)
    SuzuriBridge(app, config=config.get('SUZURI_BRIDGE', {}) if config else None, service=service)
    return app


__all__ = ['SuzuriBridge', 'create_app', 'Config']
