"""
Uploads Module
==============

POST /api/upload normalizes an image and parks it in UPLOAD_TMP_DIR so a
later POST /api/products can turn it into a product.
"""

from flask import Blueprint

uploads_bp = Blueprint(
    'uploads',
    __name__,
    url_prefix='/api'
)

from . import routes

__all__ = ['uploads_bp']
