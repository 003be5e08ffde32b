"""Remote cart contract and its in-process implementation"""

import logging
import uuid
from typing import Callable, Optional, Protocol

from ..core.errors import NotFoundError
from ..database.carts import CartDatabase, cart_db as default_cart_db
from ..database.query import ChangeEvent
from ..models.cart import CartLine

logger = logging.getLogger(__name__)


class CartRemote(Protocol):
    """
    What the cart manager needs from the remote store.

    Lines are addressed by product id: a cart holds at most one line per
    product, and local line ids are not known to the store.
    """

    client_id: str

    async def fetch_cart(self) -> list[CartLine]:
        ...

    async def add_item(self, product_id: str, quantity: int) -> CartLine:
        """Insert a row, or increment the existing row's quantity"""
        ...

    async def update_quantity(self, product_id: str, quantity: int) -> CartLine:
        ...

    async def remove_item(self, product_id: str) -> None:
        ...


class TableCartRemote:
    """CartRemote over the in-process cart table, with a change feed"""

    def __init__(self, user_id: str, carts: Optional[CartDatabase] = None, client_id: Optional[str] = None):
        self.user_id = user_id
        self.carts = carts or default_cart_db
        self.client_id = client_id or str(uuid.uuid4())

    def _row_id(self, product_id: str) -> str:
        row = self.carts.table.first(user_id=self.user_id, product_id=product_id)
        if not row:
            raise NotFoundError(f"No cart row for product {product_id}")
        return row["id"]

    async def fetch_cart(self) -> list[CartLine]:
        return self.carts.get_cart(self.user_id)

    async def add_item(self, product_id: str, quantity: int) -> CartLine:
        line = self.carts.add_item(self.user_id, product_id, quantity, origin=self.client_id)
        if line is None:
            raise NotFoundError(f"Product {product_id} not found")
        return line

    async def update_quantity(self, product_id: str, quantity: int) -> CartLine:
        return self.carts.update_quantity(
            self.user_id, self._row_id(product_id), quantity, origin=self.client_id
        )

    async def remove_item(self, product_id: str) -> None:
        row = self.carts.table.first(user_id=self.user_id, product_id=product_id)
        if row:
            self.carts.remove_item(self.user_id, row["id"], origin=self.client_id)

    def watch(self, callback: Callable[[ChangeEvent], None]) -> Callable[[], None]:
        """Subscribe to changes of this user's cart rows"""
        return self.carts.table.subscribe(callback, user_id=self.user_id)
