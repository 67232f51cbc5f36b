"""
Catalog Module
==============

Read-only views of SUZURI data.

API Endpoints:
- GET /api/items - item types that products can be made on
- GET /api/my-products - a user's products (paginated, optional materialId)
"""

from flask import Blueprint

catalog_bp = Blueprint(
    'catalog',
    __name__,
    url_prefix='/api'
)

from . import routes

__all__ = ['catalog_bp']
