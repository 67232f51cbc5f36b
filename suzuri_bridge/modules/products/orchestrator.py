"""
Product Orchestrator
====================

The single pipeline behind every product-creation route:

    validate -> normalize image(s) -> POST /materials -> reshape response

Any failure aborts the whole operation with a ValidationError,
ProcessingError or UpstreamError. SUZURI may still hold a material created
before a later step failed; there is no compensating call for that.
"""

import os
from concurrent.futures import ThreadPoolExecutor

from ...core.config import get_config_value
from ...core.errors import ValidationError, UpstreamError
from ...core.imaging import ImageAsset, validate_image, normalize_asset
from ...core.logging_service import LoggingService
from ..suzuri.urls import build_url, build_variants, DEFAULT_USERNAME

# Full Graphic T-shirt and Clear File need a front and a back image
DUAL_SIDED_ITEM_IDS = frozenset({8, 101})
RESIZE_MODES = ('contain', 'cover')
DEFAULT_ITEM_ID = 1  # T-shirt
DEFAULT_RESIZE_MODE = 'contain'


def parse_item_id(value):
    """itemId from a form or JSON body; anything unusable means the T-shirt"""
    try:
        return int(value) or DEFAULT_ITEM_ID
    except (TypeError, ValueError):
        return DEFAULT_ITEM_ID


class ProductCreationRequest:
    """Everything needed to create one material + product"""

    def __init__(self, primary_image, title, secondary_image=None, description=None,
                 published=True, resize_mode=None, item_id=DEFAULT_ITEM_ID):
        self.primary_image = primary_image
        self.secondary_image = secondary_image
        self.title = title
        self.description = description
        self.published = published
        # None means the caller did not choose; see effective_resize_mode
        self.resize_mode = resize_mode or None
        self.item_id = item_id

    @property
    def requires_front_back(self):
        return self.item_id in DUAL_SIDED_ITEM_IDS

    @property
    def effective_resize_mode(self):
        return self.resize_mode or DEFAULT_RESIZE_MODE

    @property
    def back_resize_mode(self):
        # Back prints are usually full-bleed
        return self.resize_mode or 'cover'


class ProductOrchestrator:
    """Turns a ProductCreationRequest into the JSON returned to the frontend"""

    def __init__(self, client, upload_dir=None):
        self.client = client
        self.upload_dir = upload_dir

    # ===== Validation =====

    def validate(self, req):
        """Structural checks, in order; the first failure wins"""
        if req.primary_image is None:
            raise ValidationError('No file uploaded')

        if req.requires_front_back and req.secondary_image is None:
            raise ValidationError('Back image is required for Full Graphic T-shirt and Clear File')

        if not req.title or not str(req.title).strip():
            raise ValidationError('Title is required')

        if req.resize_mode is not None and req.resize_mode not in RESIZE_MODES:
            raise ValidationError('Invalid resizeMode. Allowed values: contain, cover')

    # ===== Pipeline =====

    def normalize_images(self, req):
        """Returns (front, back); back is None for single-sided items"""
        primary = req.primary_image
        secondary = req.secondary_image if req.requires_front_back else None

        # Type/size checks for both sides before any decoding
        validate_image(primary.data, primary.mimetype, primary.label, primary.size)
        if secondary is None:
            return normalize_asset(primary), None

        validate_image(secondary.data, secondary.mimetype, secondary.label, secondary.size)
        with ThreadPoolExecutor(max_workers=2) as pool:
            front_job = pool.submit(normalize_asset, primary)
            back_job = pool.submit(normalize_asset, secondary)
            return front_job.result(), back_job.result()

    def create_product(self, req):
        """
        Create a material and product on SUZURI.

        Returns the CreationResult dict. Raises ValidationError before any
        network call for bad input, ProcessingError for undecodable images
        and UpstreamError when SUZURI fails or creates no product.
        """
        self.validate(req)

        front, back = self.normalize_images(req)
        LoggingService.info('products', f"Creating product '{req.title}' for item {req.item_id}", {
            'front': repr(front),
            'back': repr(back) if back else None,
        })

        response = self.client.create_material(
            front,
            title=req.title,
            description=req.description or None,
            products=[
                {
                    'itemId': req.item_id,
                    'published': req.published,
                    'resizeMode': req.effective_resize_mode,
                },
            ],
            back=back,
            back_resize_mode=req.back_resize_mode if back is not None else None,
        )

        return self.build_result(response or {}, req.item_id)

    def create_product_from_path(self, image_path, title, **options):
        """
        Create a product from an image written earlier by /api/upload.

        The temp file is removed afterwards whatever the outcome of the
        SUZURI call.
        """
        asset, path = self._read_upload(image_path)
        try:
            return self.create_product(ProductCreationRequest(asset, title, **options))
        finally:
            try:
                os.unlink(path)
            except OSError as e:
                LoggingService.warning('products', f"Failed to delete temporary file: {e}")

    def _read_upload(self, image_path):
        if not image_path:
            raise ValidationError('Missing required fields: imagePath and title')
        if not isinstance(image_path, str):
            raise ValidationError('Failed to read image file')

        path = os.path.realpath(image_path)
        tmp_dir = os.path.realpath(self.upload_dir or get_config_value('UPLOAD_TMP_DIR'))
        if os.path.commonpath([tmp_dir, path]) != tmp_dir:
            raise ValidationError('Failed to read image file')

        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError:
            raise ValidationError('Failed to read image file')

        # /api/upload only ever writes PNG
        return ImageAsset(data, 'image/png', len(data), 'primary'), path

    # ===== Response shaping =====

    def build_result(self, response, requested_item_id=DEFAULT_ITEM_ID):
        """Reshape a POST /materials response into the CreationResult"""
        products = response.get('products') or []
        if not products:
            raise UpstreamError('No product was created')

        product = products[0] or {}
        material = response.get('material') or {}
        user = material.get('user') or {}

        username = user.get('name') or DEFAULT_USERNAME
        material_id = material.get('id')
        item = product.get('item') or None
        sample_variant = product.get('sampleItemVariant') or {}
        sample_size = (sample_variant.get('size') or {}).get('name')
        sample_color = (sample_variant.get('color') or {}).get('name')
        item_slug = item.get('name') if item else None

        complete_url = product.get('sampleUrl') or build_url(
            username, material_id, item_slug, sample_size, sample_color
        )

        # Only synthesize variant URLs when SUZURI returned a real product page
        variants = []
        if item and product.get('url'):
            variants = build_variants(username, material_id, item_slug)

        item_name = 'Product'
        if item:
            item_name = item.get('humanizeName') or item.get('name') or item_name

        return {
            'success': True,
            'product': {
                'id': product.get('id'),
                'title': product.get('title'),
                'url': complete_url,
                'sampleImageUrl': product.get('sampleImageUrl'),
                'sampleUrl': product.get('sampleUrl'),
                'published': product.get('published'),
            },
            'material': {
                'id': material_id,
            },
            'item': {
                'id': (item.get('id') if item else None) or requested_item_id,
                'name': item_name,
                'variants': variants,
            },
        }
