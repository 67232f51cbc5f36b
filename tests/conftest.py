"""
Shared fixtures for the SUZURI bridge tests.

Run with: pytest tests/ -v
Install with: pip install -e ".[dev]"
"""

import io
import shutil
import tempfile
from unittest.mock import MagicMock

import pytest
from PIL import Image

from suzuri_bridge import create_app
from suzuri_bridge.modules.suzuri import SuzuriService


def make_image_bytes(width=500, height=500, fmt='PNG', mode='RGB', color=(200, 40, 40)):
    """Encode a solid-colour test image"""
    if mode == 'RGBA' and len(color) == 3:
        color = color + (128,)
    img = Image.new(mode, (width, height), color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def upstream_response(**overrides):
    """A typical POST /materials response (no sampleUrl)"""
    response = {
        'material': {'id': 42, 'user': {'name': 'alice'}},
        'products': [{
            'id': 7,
            'title': 'Test',
            'url': 'https://suzuri.jp/alice/7',
            'sampleImageUrl': 'https://cdn.suzuri.jp/7.png',
            'published': True,
            'item': {'id': 1, 'name': 'tshirt', 'humanizeName': 'T-Shirt'},
            'sampleItemVariant': {'size': {'name': 'm'}, 'color': {'name': 'black'}},
        }],
    }
    response.update(overrides)
    return response


@pytest.fixture
def png_bytes():
    return make_image_bytes()


@pytest.fixture
def tmp_upload_dir():
    """Temporary UPLOAD_TMP_DIR, cleaned up after."""
    d = tempfile.mkdtemp(prefix="suzuri-bridge-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def suzuri_service():
    """Stand-in for the SUZURI client; no network access"""
    service = MagicMock(spec=SuzuriService)
    service.create_material.return_value = upstream_response()
    service.describe.return_value = {}
    return service


@pytest.fixture
def app(tmp_upload_dir, suzuri_service):
    return create_app({
        'TESTING': True,
        'SUZURI_API_KEY': 'test-key',
        'UPLOAD_TMP_DIR': tmp_upload_dir,
    }, service=suzuri_service)


@pytest.fixture
def client(app):
    return app.test_client()
