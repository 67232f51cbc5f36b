from flask import request, jsonify, current_app
from . import catalog_bp
from ..suzuri.urls import build_url, DEFAULT_USERNAME
from ...core.errors import BridgeError
from ...core.logging_service import LoggingService


def _bridge():
    return current_app.extensions['suzuri_bridge']


def format_user_product(product, user_name=None):
    """Flatten one SUZURI product and give it a browsable URL"""
    material = product.get('material') or {}
    item = product.get('item') or None
    sample_variant = product.get('sampleItemVariant') or None

    username = (material.get('user') or {}).get('name') or user_name or DEFAULT_USERNAME
    material_id = material.get('id')

    complete_url = product.get('sampleUrl')
    if not complete_url:
        if material_id and item and sample_variant:
            complete_url = build_url(
                username,
                material_id,
                item.get('name'),
                (sample_variant.get('size') or {}).get('name'),
                (sample_variant.get('color') or {}).get('name'),
            )
        else:
            complete_url = product.get('url')

    formatted = {
        'id': product.get('id'),
        'title': product.get('title'),
        'url': complete_url,
        'sampleImageUrl': product.get('sampleImageUrl'),
        'published': product.get('published'),
        'createdAt': product.get('createdAt'),
        'updatedAt': product.get('updatedAt'),
        'price': product.get('price'),
        'priceWithTax': product.get('priceWithTax'),
    }
    if item:
        formatted['item'] = {
            'id': item.get('id'),
            'name': item.get('humanizeName') or item.get('name'),
        }
    if material_id:
        formatted['material'] = {
            'id': material_id,
            'title': material.get('title'),
            'thumbnailUrl': material.get('thumbnailUrl'),
        }
    return formatted


@catalog_bp.route('/items', methods=['GET'])
def get_items():
    """Simplified item list"""
    try:
        items = _bridge().service.get_items()
    except BridgeError as e:
        LoggingService.error('catalog', f"Failed to fetch items: {e}")
        return jsonify({'error': 'Failed to fetch available items', 'details': str(e)}), 500

    return jsonify({
        'items': [{
            'id': item.get('id'),
            'name': item.get('humanizeName'),
            'exemplaryAngle': item.get('exemplaryAngle'),
            'published': item.get('published'),
            'variantCount': len(item.get('variants') or []),
        } for item in items],
    })


@catalog_bp.route('/my-products', methods=['GET'])
def get_my_products():
    """
    A user's products with complete URLs.

    Query params:
        limit: page size (default 20)
        offset: page start (default 0)
        userId / userName: whose products; one of them is required
        materialId: only products made from this material
    """
    limit = request.args.get('limit', 20, type=int)
    offset = request.args.get('offset', 0, type=int)
    user_id = request.args.get('userId', type=int)
    user_name = request.args.get('userName')
    material_id = request.args.get('materialId', type=int)

    if not user_id and not user_name:
        return jsonify({'error': 'Either userId or userName parameter is required'}), 400

    try:
        result = _bridge().service.get_user_products(
            user_id=user_id,
            user_name=user_name,
            material_id=material_id,
            limit=limit,
            offset=offset,
        )
    except BridgeError as e:
        LoggingService.error('catalog', f"Failed to fetch user products: {e}")
        return jsonify({'error': 'Failed to fetch user products', 'details': str(e)}), 500

    products = result['products']
    if material_id:
        products = [
            product for product in products
            if (product.get('material') or {}).get('id') == material_id
        ]

    formatted = [format_user_product(product, user_name) for product in products]

    pagination = dict(result['pagination'])
    pagination['count'] = len(formatted) if material_id else pagination['count']
    pagination['filtered'] = bool(material_id)

    return jsonify({
        'success': True,
        'products': formatted,
        'pagination': pagination,
    })
