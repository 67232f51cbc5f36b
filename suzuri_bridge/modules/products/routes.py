"""
Product Routes
==============

Thin HTTP layer over ProductOrchestrator. All of the decision logic lives in
orchestrator.py; these handlers only read the request and map errors to
status codes.
"""

from flask import request, jsonify, current_app
from . import products_bp
from .orchestrator import ProductCreationRequest, parse_item_id
from ...core.errors import BridgeError, ValidationError
from ...core.imaging import image_asset_from_upload
from ...core.logging_service import LoggingService


def _bridge():
    return current_app.extensions['suzuri_bridge']


def _error_response(error):
    """JSON body + status for a pipeline failure"""
    if isinstance(error, ValidationError):
        LoggingService.info('products', f"Rejected request: {error.message}")
    else:
        LoggingService.error('products', 'Product creation error', {
            'error': str(error),
            'upstream_status': getattr(error, 'upstream_status', None),
            'upstream_body': getattr(error, 'upstream_body', None),
        })
    return jsonify(error.to_dict()), error.status_code


@products_bp.route('/create-product', methods=['POST'])
def create_product():
    """Create a material + product from a multipart upload"""
    form = request.form

    req = ProductCreationRequest(
        primary_image=image_asset_from_upload(request.files.get('file'), 'primary'),
        secondary_image=image_asset_from_upload(request.files.get('fileBack'), 'secondary'),
        title=form.get('title'),
        description=form.get('description'),
        published=form.get('published') != 'false',
        resize_mode=form.get('resizeMode'),
        item_id=parse_item_id(form.get('itemId')),
    )

    try:
        result = _bridge().orchestrator.create_product(req)
    except BridgeError as e:
        return _error_response(e)

    return jsonify(result)


@products_bp.route('/products', methods=['POST'])
def create_product_from_upload():
    """Create a material + product from a file written by /api/upload"""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}

    if not body.get('imagePath') or not body.get('title'):
        return jsonify({'error': 'Missing required fields: imagePath and title'}), 400

    try:
        result = _bridge().orchestrator.create_product_from_path(
            body['imagePath'],
            body['title'],
            description=body.get('description'),
            published=body.get('published') is not False,
            resize_mode=body.get('resizeMode'),
            item_id=parse_item_id(body.get('itemId')),
        )
    except BridgeError as e:
        return _error_response(e)

    return jsonify(result)


@products_bp.route('/products', methods=['GET'])
def get_products():
    """Item catalog, or one product when ?id= is given"""
    product_id = request.args.get('id', type=int)
    service = _bridge().service

    try:
        if product_id is None:
            items = service.get_items()
            return jsonify({
                'items': [{
                    'id': item.get('id'),
                    'name': item.get('humanizeName'),
                    'exemplaryAngle': item.get('exemplaryAngle'),
                    'published': item.get('published'),
                } for item in items],
            })

        product = service.get_product(product_id) or {}
        return jsonify({
            'product': {
                'id': product.get('id'),
                'title': product.get('title'),
                'url': product.get('url'),
                'sampleImageUrl': product.get('sampleImageUrl'),
                'published': product.get('published'),
            },
        })
    except BridgeError as e:
        LoggingService.error('products', f"Product fetch error: {e}")
        return jsonify({'error': 'Failed to fetch product information'}), 500
