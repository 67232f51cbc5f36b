"""
Product Orchestrator Tests
==========================

The orchestrator talks to a MagicMock client, so call counts show whether
SUZURI would have been contacted.
"""

import os
from unittest.mock import MagicMock

import pytest

from suzuri_bridge.core.errors import ValidationError, ProcessingError, UpstreamError
from suzuri_bridge.core.imaging import ImageAsset, NormalizedImage
from suzuri_bridge.modules.products.orchestrator import (
    DUAL_SIDED_ITEM_IDS, ProductCreationRequest, ProductOrchestrator, parse_item_id,
)

from conftest import make_image_bytes, upstream_response


def _asset(label='primary', **kwargs):
    data = make_image_bytes(**kwargs)
    return ImageAsset(data, 'image/png', len(data), label)


@pytest.fixture
def client():
    client = MagicMock()
    client.create_material.return_value = upstream_response()
    return client


@pytest.fixture
def orchestrator(client, tmp_upload_dir):
    return ProductOrchestrator(client, upload_dir=tmp_upload_dir)


# ---------------------------------------------------------------------------
# Validation order and dual-sided items
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("item_id", [1, 2, 7, 9, 100, 102])
@pytest.mark.parametrize("with_back", [False, True])
def test_single_sided_items_need_only_primary_and_title(orchestrator, item_id, with_back):
    req = ProductCreationRequest(
        _asset(),
        'Test',
        secondary_image=_asset('secondary') if with_back else None,
        item_id=item_id,
    )

    orchestrator.validate(req)


@pytest.mark.parametrize("item_id", sorted(DUAL_SIDED_ITEM_IDS))
def test_dual_sided_items_require_back_image(orchestrator, client, item_id):
    req = ProductCreationRequest(_asset(), 'Test', item_id=item_id)

    with pytest.raises(ValidationError) as exc:
        orchestrator.create_product(req)

    assert exc.value.message == 'Back image is required for Full Graphic T-shirt and Clear File'
    assert client.create_material.call_count == 0


def test_missing_primary_is_reported_first(orchestrator, client):
    # No file, no back image, no title: the file error wins
    req = ProductCreationRequest(None, '', item_id=8)

    with pytest.raises(ValidationError) as exc:
        orchestrator.create_product(req)

    assert exc.value.message == 'No file uploaded'
    client.create_material.assert_not_called()


def test_back_image_checked_before_title(orchestrator):
    req = ProductCreationRequest(_asset(), '', item_id=101)

    with pytest.raises(ValidationError) as exc:
        orchestrator.validate(req)

    assert 'Back image is required' in exc.value.message


@pytest.mark.parametrize("title", [None, '', '   '])
def test_title_required(orchestrator, client, title):
    with pytest.raises(ValidationError) as exc:
        orchestrator.create_product(ProductCreationRequest(_asset(), title))

    assert exc.value.message == 'Title is required'
    client.create_material.assert_not_called()


def test_unknown_resize_mode_rejected(orchestrator):
    req = ProductCreationRequest(_asset(), 'Test', resize_mode='stretch')

    with pytest.raises(ValidationError):
        orchestrator.validate(req)


def test_bad_back_image_type_is_named(orchestrator, client):
    back = ImageAsset(b'GIF89a', 'image/gif', 6, 'secondary')
    req = ProductCreationRequest(_asset(), 'Test', secondary_image=back, item_id=8)

    with pytest.raises(ValidationError) as exc:
        orchestrator.create_product(req)

    assert exc.value.message == 'Invalid back file format. Allowed formats: JPEG, PNG, WebP'
    client.create_material.assert_not_called()


def test_corrupt_image_is_processing_error(orchestrator, client):
    req = ProductCreationRequest(ImageAsset(b'junk', 'image/png', 4, 'primary'), 'Test')

    with pytest.raises(ProcessingError):
        orchestrator.create_product(req)

    client.create_material.assert_not_called()


@pytest.mark.parametrize("value, expected", [
    ('8', 8), (101, 101), (None, 1), ('', 1), ('abc', 1), ('0', 1),
])
def test_parse_item_id(value, expected):
    assert parse_item_id(value) == expected


# ---------------------------------------------------------------------------
# Payload shape sent to the client
# ---------------------------------------------------------------------------

def test_single_image_call(orchestrator, client):
    req = ProductCreationRequest(
        _asset(), 'Test', description='desc', published=False, item_id=3,
        secondary_image=_asset('secondary'),
    )

    orchestrator.create_product(req)

    args, kwargs = client.create_material.call_args
    assert isinstance(args[0], NormalizedImage)
    assert kwargs['title'] == 'Test'
    assert kwargs['description'] == 'desc'
    assert kwargs['products'] == [{'itemId': 3, 'published': False, 'resizeMode': 'contain'}]
    # Back image is ignored for single-sided items
    assert kwargs['back'] is None
    assert kwargs['back_resize_mode'] is None


def test_dual_image_call_defaults_back_to_cover(orchestrator, client):
    req = ProductCreationRequest(
        _asset(width=300, height=300),
        'Test',
        secondary_image=_asset('secondary', width=200, height=100),
        item_id=8,
    )

    orchestrator.create_product(req)

    args, kwargs = client.create_material.call_args
    assert (args[0].width, args[0].height) == (300, 300)
    assert (kwargs['back'].width, kwargs['back'].height) == (200, 100)
    assert kwargs['products'][0]['resizeMode'] == 'contain'
    assert kwargs['back_resize_mode'] == 'cover'


def test_dual_image_call_propagates_explicit_resize_mode(orchestrator, client):
    req = ProductCreationRequest(
        _asset(), 'Test', secondary_image=_asset('secondary'),
        item_id=101, resize_mode='contain',
    )

    orchestrator.create_product(req)

    _, kwargs = client.create_material.call_args
    assert kwargs['back_resize_mode'] == 'contain'


# ---------------------------------------------------------------------------
# Response shaping
# ---------------------------------------------------------------------------

def test_end_to_end_synthesizes_url(orchestrator):
    result = orchestrator.create_product(ProductCreationRequest(_asset(), 'Test', item_id=1))

    assert result['success'] is True
    assert result['product']['id'] == 7
    assert result['product']['url'] == 'https://suzuri.jp/alice/42/tshirt/m/black'
    assert result['product']['sampleUrl'] is None
    assert result['material'] == {'id': 42}
    assert result['item']['id'] == 1
    assert result['item']['name'] == 'T-Shirt'
    assert len(result['item']['variants']) == 20


def test_sample_url_used_verbatim(orchestrator, client):
    response = upstream_response()
    response['products'][0]['sampleUrl'] = 'https://suzuri.jp/alice/999/tshirt/xl/navy'
    client.create_material.return_value = response

    result = orchestrator.create_product(ProductCreationRequest(_asset(), 'Test'))

    assert result['product']['url'] == 'https://suzuri.jp/alice/999/tshirt/xl/navy'
    assert result['product']['sampleUrl'] == 'https://suzuri.jp/alice/999/tshirt/xl/navy'


def test_empty_products_is_upstream_failure(orchestrator, client):
    client.create_material.return_value = upstream_response(products=[])

    with pytest.raises(UpstreamError) as exc:
        orchestrator.create_product(ProductCreationRequest(_asset(), 'Test'))

    assert exc.value.message == 'No product was created'


def test_missing_products_key_is_upstream_failure(orchestrator):
    with pytest.raises(UpstreamError):
        orchestrator.build_result({'material': {'id': 1}})


def test_upstream_error_propagates(orchestrator, client):
    client.create_material.side_effect = UpstreamError('SUZURI API Error: boom', 422, {'error': 'boom'})

    with pytest.raises(UpstreamError) as exc:
        orchestrator.create_product(ProductCreationRequest(_asset(), 'Test'))

    assert exc.value.upstream_status == 422
    assert client.create_material.call_count == 1


def test_sparse_response_uses_defaults(orchestrator):
    result = orchestrator.build_result({'products': [{'id': 5}]}, requested_item_id=8)

    assert result['product']['url'] == 'https://suzuri.jp/suzuri/unknown/product/s/white'
    assert result['material'] == {'id': None}
    assert result['item'] == {'id': 8, 'name': 'Product', 'variants': []}


def test_no_variants_without_product_url(orchestrator):
    response = upstream_response()
    del response['products'][0]['url']

    result = orchestrator.build_result(response)

    assert result['item']['variants'] == []
    assert result['item']['name'] == 'T-Shirt'


def test_no_variants_without_item(orchestrator):
    response = upstream_response()
    del response['products'][0]['item']

    result = orchestrator.build_result(response, requested_item_id=4)

    assert result['item'] == {'id': 4, 'name': 'Product', 'variants': []}
    assert result['product']['url'] == 'https://suzuri.jp/alice/42/product/m/black'


def test_item_name_falls_back_to_slug(orchestrator):
    response = upstream_response()
    response['products'][0]['item'] = {'id': 2, 'name': 'mug'}

    result = orchestrator.build_result(response)

    assert result['item']['name'] == 'mug'
    assert result['item']['variants'][0]['url'] == 'https://suzuri.jp/alice/42/mug/s/white'


# ---------------------------------------------------------------------------
# Creating from a temp upload
# ---------------------------------------------------------------------------

def test_create_from_path_deletes_temp_file(orchestrator, client, tmp_upload_dir):
    path = os.path.join(tmp_upload_dir, 'upload_1.png')
    with open(path, 'wb') as f:
        f.write(make_image_bytes())

    result = orchestrator.create_product_from_path(path, 'Test', item_id=2)

    assert result['product']['id'] == 7
    assert client.create_material.call_args[1]['products'][0]['itemId'] == 2
    assert not os.path.exists(path)


def test_create_from_path_deletes_temp_file_on_failure(orchestrator, client, tmp_upload_dir):
    client.create_material.return_value = upstream_response(products=[])
    path = os.path.join(tmp_upload_dir, 'upload_2.png')
    with open(path, 'wb') as f:
        f.write(make_image_bytes())

    with pytest.raises(UpstreamError):
        orchestrator.create_product_from_path(path, 'Test')

    assert not os.path.exists(path)


def test_create_from_path_outside_upload_dir(orchestrator, client, tmp_path):
    outside = tmp_path / 'elsewhere.png'
    outside.write_bytes(make_image_bytes())

    with pytest.raises(ValidationError) as exc:
        orchestrator.create_product_from_path(str(outside), 'Test')

    assert exc.value.message == 'Failed to read image file'
    assert outside.exists()
    client.create_material.assert_not_called()


def test_create_from_missing_path(orchestrator, tmp_upload_dir):
    with pytest.raises(ValidationError):
        orchestrator.create_product_from_path(os.path.join(tmp_upload_dir, 'nope.png'), 'Test')
