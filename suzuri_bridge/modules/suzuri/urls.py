"""
Canonical SUZURI product URLs.

SUZURI's creation response does not reliably include a browsable URL for
every variant, so product pages are rebuilt from the username, material id,
item slug, size and color.
"""

SUZURI_WEB_URL = 'https://suzuri.jp'

# Common sizes and colors based on SUZURI standards
SIZES = ['s', 'm', 'l', 'xl']
COLORS = ['white', 'gray', 'black', 'navy', 'red']

DEFAULT_USERNAME = 'suzuri'
DEFAULT_MATERIAL_ID = 'unknown'
DEFAULT_ITEM_SLUG = 'product'
DEFAULT_SIZE = 's'
DEFAULT_COLOR = 'white'


def _segment(value, default):
    if value is None or value == '':
        return default
    return str(value)


def build_url(username, material_id, item_slug, size, color):
    """
    Build a product page URL, e.g.
    https://suzuri.jp/alice/42/tshirt/m/black

    Missing segments are replaced by literal defaults so the result is
    always well-formed.
    """
    return '/'.join([
        SUZURI_WEB_URL,
        _segment(username, DEFAULT_USERNAME),
        _segment(material_id, DEFAULT_MATERIAL_ID),
        _segment(item_slug, DEFAULT_ITEM_SLUG),
        _segment(size, DEFAULT_SIZE),
        _segment(color, DEFAULT_COLOR),
    ])


def build_variants(username, material_id, item_slug):
    """Every size x color combination with its product URL"""
    return [
        {
            'size': size,
            'color': color,
            'url': build_url(username, material_id, item_slug, size, color),
        }
        for size in SIZES
        for color in COLORS
    ]
