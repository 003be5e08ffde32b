"""
Mood Store API Client

HTTP client for the store API. Implements the remote cart contract used by
the cart manager, plus the catalog, checkout, order and invoice calls.
"""

import logging
import uuid
from typing import Any, Optional

import httpx

from ..core.config import settings
from ..core.errors import NotFoundError
from ..models.cart import CartLine

logger = logging.getLogger(__name__)


class StoreClient:
    """
    Client for the Mood Store API.

    Every request carries the user's access token and an ``X-Client-Id``
    header so that change notifications caused by this client can be told
    apart from changes made in other sessions.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        access_token: Optional[str] = None,
        client_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize store client.

        Args:
            base_url: Base URL of the store API; defaults to settings
            access_token: Bearer token of the signed-in user
            client_id: Writer id sent with cart mutations
            transport: Custom httpx transport (e.g. ASGI transport in tests)
            timeout: Request timeout in seconds
        """
        self.base_url = (base_url or settings.store_base_url).rstrip("/")
        self.access_token = access_token
        self.client_id = client_id or str(uuid.uuid4())
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )
        # product id -> remote cart line id
        self._line_ids: dict[str, str] = {}

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def __aenter__(self) -> "StoreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "X-Client-Id": self.client_id,
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> httpx.Response:
        response = await self._http_client.request(
            method=method,
            url=path,
            headers=self._headers(),
            json=body,
            params=params,
        )

        if response.status_code >= 400:
            logger.error(f"Request failed: {method} {path} {response.status_code} - {response.text}")
            response.raise_for_status()

        return response

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Make an HTTP request and decode the JSON body"""
        response = await self._send(method, path, body=body, params=params)
        return response.json()

    # ==================== Product APIs ====================

    async def search_products(
        self,
        mood: Optional[str] = None,
        query: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 20,
    ) -> dict:
        """Search products in the catalog"""
        params: dict[str, Any] = {"limit": limit}
        if mood:
            params["mood"] = mood
        if query:
            params["query"] = query
        if category:
            params["category"] = category
        return await self._request("GET", "/api/products", params=params)

    async def get_product(self, product_id: str) -> dict:
        """Get product details"""
        return await self._request("GET", f"/api/products/{product_id}")

    # ==================== Cart APIs ====================

    async def fetch_cart(self) -> list[CartLine]:
        """Full remote cart of the signed-in user"""
        data = await self._request("GET", "/api/cart")
        lines = [CartLine(**item) for item in data["items"]]
        self._line_ids = {line.product_id: line.id for line in lines}
        return lines

    async def _line_id(self, product_id: str) -> str:
        if product_id not in self._line_ids:
            await self.fetch_cart()
        if product_id not in self._line_ids:
            raise NotFoundError(f"No cart row for product {product_id}")
        return self._line_ids[product_id]

    async def add_item(self, product_id: str, quantity: int) -> CartLine:
        """Add item to cart, incrementing an existing row"""
        data = await self._request(
            "POST",
            "/api/cart/items",
            body={"product_id": product_id, "quantity": quantity},
        )
        line = CartLine(**data)
        self._line_ids[line.product_id] = line.id
        return line

    async def update_quantity(self, product_id: str, quantity: int) -> CartLine:
        """Update item quantity in cart"""
        line_id = await self._line_id(product_id)
        data = await self._request(
            "PUT",
            f"/api/cart/items/{line_id}",
            body={"quantity": quantity},
        )
        return CartLine(**data)

    async def remove_item(self, product_id: str) -> None:
        """Remove item from cart; nothing to do if the store has no row for it"""
        try:
            line_id = await self._line_id(product_id)
        except NotFoundError:
            return
        await self._request("DELETE", f"/api/cart/items/{line_id}")
        self._line_ids.pop(product_id, None)

    async def clear_cart(self) -> None:
        await self._request("DELETE", "/api/cart")
        self._line_ids.clear()

    # ==================== Checkout APIs ====================

    async def checkout(self, shipping: dict, shipping_method: str = "standard") -> dict:
        """Place an order from the remote cart"""
        body = dict(shipping)
        body["shipping_method"] = shipping_method
        result = await self._request("POST", "/api/checkout", body=body)
        self._line_ids.clear()
        return result

    async def list_orders(self) -> list[dict]:
        return await self._request("GET", "/api/orders")

    async def get_order(self, order_id: str) -> dict:
        """Get order details"""
        return await self._request("GET", f"/api/orders/{order_id}")

    async def download_invoice(self, order_id: str) -> bytes:
        """Invoice PDF bytes"""
        response = await self._send("GET", "/api/download-invoice", params={"orderId": order_id})
        return response.content

    async def email_invoice(self, order_id: str) -> dict:
        return await self._request("POST", "/api/generate-invoice", body={"orderId": order_id})

    # ==================== Mood APIs ====================

    async def submit_quiz(self, answers: list[dict]) -> dict:
        """Score a completed quiz; answers are ``{question_index, mood}``"""
        return await self._request("POST", "/api/mood-quiz", body={"answers": answers})

    async def recent_moods(self) -> list[dict]:
        return await self._request("GET", "/api/moods/recent")
