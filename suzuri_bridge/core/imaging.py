"""
Image Normalizer
================

Validates uploaded images and transcodes them into the single format the
SUZURI API embeds: PNG, at most 2000x2000, aspect ratio preserved and never
enlarged.
"""

import io
import base64
from collections import namedtuple

from PIL import Image, UnidentifiedImageError

from .errors import ValidationError, ProcessingError

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
MAX_DIMENSION = 2000
ALLOWED_FORMATS = ('image/jpeg', 'image/png', 'image/webp')
OUTPUT_MIMETYPE = 'image/png'

# label is "primary" or "secondary" and only affects error messages
ImageAsset = namedtuple('ImageAsset', ['data', 'mimetype', 'size', 'label'])


def image_asset_from_upload(file_storage, label='primary'):
    """Build an ImageAsset from a werkzeug FileStorage (None if nothing was sent)"""
    if file_storage is None or not file_storage.filename:
        return None
    data = file_storage.read()
    return ImageAsset(data, file_storage.mimetype, len(data), label)


class NormalizedImage:
    """PNG bytes produced by normalize_image"""

    mimetype = OUTPUT_MIMETYPE

    def __init__(self, data, width, height):
        self.data = data
        self.width = width
        self.height = height

    @property
    def size(self):
        return len(self.data)

    def data_uri(self):
        encoded = base64.b64encode(self.data).decode('ascii')
        return f"data:{self.mimetype};base64,{encoded}"

    def __repr__(self):
        return f"<NormalizedImage {self.width}x{self.height} {self.size} bytes>"


def _describe(label):
    return 'back file' if label == 'secondary' else 'file'


def validate_image(data, mimetype, label='primary', size=None):
    """
    Cheap checks that run before any decoding.

    Raises ValidationError naming the image when the declared type is not
    JPEG/PNG/WebP or the payload is larger than MAX_FILE_SIZE.
    """
    what = _describe(label)

    if mimetype not in ALLOWED_FORMATS:
        prefix = 'Invalid back file format' if label == 'secondary' else 'Invalid file format'
        raise ValidationError(f"{prefix}. Allowed formats: JPEG, PNG, WebP")

    if size is None:
        size = len(data) if data is not None else 0
    if size > MAX_FILE_SIZE:
        raise ValidationError(f"{what[0].upper()}{what[1:]} size exceeds maximum limit of 10MB")


def _decode(data):
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise ProcessingError(f"Could not decode image: {e}")
    return img


def normalize_image(data, mimetype, label='primary'):
    """
    Validate and transcode an uploaded image.

    Args:
        data: raw uploaded bytes
        mimetype: declared MIME type from the upload
        label: "primary" or "secondary", used in error messages

    Returns:
        NormalizedImage holding PNG bytes no larger than 2000x2000
    """
    validate_image(data, mimetype, label)

    img = _decode(data)
    try:
        # Fit inside the bound; thumbnail() never enlarges
        img.thumbnail((MAX_DIMENSION, MAX_DIMENSION), Image.LANCZOS)

        if img.mode not in ('RGB', 'RGBA'):
            has_alpha = img.mode in ('LA', 'PA') or 'transparency' in img.info
            img = img.convert('RGBA' if has_alpha else 'RGB')

        buf = io.BytesIO()
        img.save(buf, format='PNG', optimize=True)
    except (OSError, ValueError) as e:
        raise ProcessingError(f"Could not process image: {e}")

    return NormalizedImage(buf.getvalue(), img.width, img.height)


def normalize_asset(asset):
    """normalize_image for an ImageAsset"""
    return normalize_image(asset.data, asset.mimetype, asset.label)
