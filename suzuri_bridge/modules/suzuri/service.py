# suzuri_bridge/modules/suzuri/service.py
import base64
import requests
from typing import Optional, Dict, Any, List

from ...core.config import Config
from ...core.errors import UpstreamError
from ...core.logging_service import LoggingService, redact

PNG_DATA_URI_PREFIX = "data:image/png;base64,"


def to_data_uri(image) -> str:
    """Embed an image as a base64 data URI (raw bytes are assumed to be PNG)"""
    if isinstance(image, (bytes, bytearray)):
        return PNG_DATA_URI_PREFIX + base64.b64encode(bytes(image)).decode("ascii")
    return image.data_uri()


class SuzuriService:
    """Service for the SUZURI marketplace REST API"""

    def __init__(self, api_key: str = None, base_url: str = None, timeout: float = None):
        self.api_key = api_key or Config.SUZURI_API_KEY
        self.base_url = (base_url or Config.SUZURI_API_BASE_URL).rstrip("/")
        self.timeout = timeout or Config.SUZURI_TIMEOUT

        # One session for the life of the process; it only carries headers
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        })

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """Send a single request to SUZURI and return the decoded JSON body"""
        if not self.api_key:
            LoggingService.error("suzuri", "SUZURI API key not configured")
            raise UpstreamError("SUZURI API key not configured")

        url = f"{self.base_url}{path}"

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            LoggingService.error("suzuri", f"SUZURI API {method} {path} failed: {e}")
            raise UpstreamError(f"SUZURI API Error: {e}")

        LoggingService.log_api_call("suzuri", path, method, response.status_code)

        if not 200 <= response.status_code < 300:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            LoggingService.error("suzuri", f"SUZURI API returned {response.status_code}", {
                "path": path,
                "response": body,
                "request": kwargs.get("json") or kwargs.get("params"),
            })
            raise UpstreamError(f"SUZURI API Error: {body}", response.status_code, body)

        try:
            return response.json()
        except ValueError:
            raise UpstreamError(
                "SUZURI API returned a non-JSON response",
                response.status_code,
                response.text,
            )

    def build_material_payload(self, front, title: str, description: str = None,
                               products: List[Dict[str, Any]] = None,
                               back=None, back_resize_mode: str = None) -> Dict[str, Any]:
        """
        Build the body for POST /materials

        Args:
            front: NormalizedImage (or PNG bytes) used as the main texture
            title: Material title
            description: Optional description
            products: Product specs ({itemId, published, resizeMode});
                defaults to a single published T-shirt
            back: Optional back image, attached to every product as a
                back-side sub material
            back_resize_mode: resizeMode for the back side (default: cover)
        """
        products = products or [
            {
                "itemId": 1,  # T-shirt
                "published": True,
                "resizeMode": "contain",
            },
        ]

        payload = {
            "texture": to_data_uri(front),
            "title": title,
            "description": description or "",
            "products": [dict(product) for product in products],
        }

        if back is not None:
            back_texture = to_data_uri(back)
            for product in payload["products"]:
                # SUZURI expects snake_case for this one key
                product["sub_materials"] = [
                    {
                        "texture": back_texture,
                        "printSide": "back",
                        "enabled": True,
                        "resizeMode": back_resize_mode or "cover",
                    },
                ]

        return payload

    def create_material(self, front, title: str, description: str = None,
                        products: List[Dict[str, Any]] = None,
                        back=None, back_resize_mode: str = None) -> Dict[str, Any]:
        """Create a material and its products on SUZURI"""
        payload = self.build_material_payload(
            front, title, description, products, back, back_resize_mode
        )
        data = self._request("POST", "/materials", json=payload)
        LoggingService.debug("suzuri", "SUZURI API Response", data)
        return data

    def get_product(self, product_id: int) -> Optional[Dict[str, Any]]:
        """Fetch a single product"""
        data = self._request("GET", f"/products/{int(product_id)}")
        return data.get("product")

    def get_items(self) -> List[Dict[str, Any]]:
        """Fetch the item (product type) catalog"""
        data = self._request("GET", "/items")
        return data.get("items") or []

    def get_user_products(self, user_id: int = None, user_name: str = None,
                          material_id: int = None, limit: int = 20,
                          offset: int = 0) -> Dict[str, Any]:
        """
        Fetch a user's products, one page at a time

        userId wins over userName when both are given.
        """
        params = {
            "limit": int(limit),
            "offset": int(offset),
        }

        if user_id:
            params["userId"] = int(user_id)
        elif user_name:
            params["userName"] = user_name

        if material_id:
            params["materialId"] = int(material_id)

        data = self._request("GET", "/products", params=params)
        return {
            "products": data.get("products") or [],
            "pagination": {
                "limit": data.get("limit") or limit,
                "offset": data.get("offset") or offset,
                "count": data.get("count") or 0,
            },
        }

    def describe(self) -> Dict[str, Any]:
        """Connection settings safe to log"""
        return redact({
            "base_url": self.base_url,
            "timeout": self.timeout,
            "authorization": self.session.headers.get("Authorization"),
        })
