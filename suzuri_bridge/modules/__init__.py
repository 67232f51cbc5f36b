"""
SUZURI Bridge Modules
=====================

Flask blueprints plus the SUZURI API client they share.
"""

__all__ = ['suzuri', 'products', 'catalog', 'uploads']
