"""
Products Module
===============

Product creation on SUZURI from uploaded images.

API Endpoints:
- POST /api/create-product - multipart upload (file, fileBack, title, ...)
- POST /api/products - create from an image saved earlier by /api/upload
- GET /api/products - item catalog, or a single product with ?id=

Usage:
    from suzuri_bridge.modules.products import products_bp
    app.register_blueprint(products_bp)
"""

from flask import Blueprint

products_bp = Blueprint(
    'products',
    __name__,
    url_prefix='/api'
)

from . import routes

__all__ = ['products_bp']
