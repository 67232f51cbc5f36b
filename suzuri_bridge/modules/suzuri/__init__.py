"""
SUZURI Module
=============

Client for the SUZURI marketplace REST API and the helpers that rebuild
browsable product URLs from its responses.

Usage:
    from suzuri_bridge.modules.suzuri import SuzuriService, build_url

    service = SuzuriService(api_key='...')
    result = service.create_material(front_image, title='My design')
"""

from .service import SuzuriService
from .urls import build_url, build_variants, SIZES, COLORS

__all__ = ['SuzuriService', 'build_url', 'build_variants', 'SIZES', 'COLORS']
