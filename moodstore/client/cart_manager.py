"""
Client-side cart with optimistic updates.

Every mutation changes the local cart at once and writes the local mirror
file; the matching remote write is dispatched afterwards and never awaited
by the caller. If a remote write fails, the error is reported through
``on_sync_error`` and the local cart is left as it is.

Remote writes for the same product run one after another in local call
order, so rapid changes to one line cannot overtake each other on the way
to the store. ``start_session`` replaces the local cart with the store's
copy (the store wins).
"""

import asyncio
import json
import logging
import os
import uuid
from decimal import Decimal
from pathlib import Path
from typing import Awaitable, Callable, Optional

from ..core.config import settings
from ..core.errors import RemoteSyncError
from ..database.query import ChangeEvent
from ..models.cart import CartLine
from ..models.product import ProductView
from .remote import CartRemote

logger = logging.getLogger(__name__)

SyncErrorCallback = Callable[[RemoteSyncError], None]
RemoteCall = Callable[[], Awaitable[object]]


def mirror_path(state_dir: str, user_id: Optional[str]) -> Path:
    """Mirror file for a user; guests share one file per device"""
    return Path(state_dir) / f"cart-{user_id or 'guest'}.json"


class CartManager:
    """Local cart, persisted per user, synced to an optional remote store"""

    def __init__(
        self,
        user_id: Optional[str] = None,
        remote: Optional[CartRemote] = None,
        state_dir: Optional[str] = None,
        on_sync_error: Optional[SyncErrorCallback] = None,
    ):
        self.user_id = user_id
        self.remote = remote
        self.path = mirror_path(state_dir or settings.cart_state_dir, user_id)
        self.on_sync_error = on_sync_error
        self._items: list[CartLine] = self._load()
        self._pending: dict[str, asyncio.Task] = {}
        self._deferred: list[tuple[str, str, RemoteCall]] = []
        self._unwatch: Optional[Callable[[], None]] = None
        self._refresh_task: Optional[asyncio.Task] = None
        self._refresh_again = False
        # Bumped on every local mutation
        self._version = 0

    # ==================== Local state ====================

    @property
    def items(self) -> list[CartLine]:
        return list(self._items)

    @property
    def count(self) -> int:
        """Total number of units in the cart"""
        return sum(line.quantity for line in self._items)

    def _find(self, line_id: str) -> Optional[CartLine]:
        return next((line for line in self._items if line.id == line_id), None)

    def add_to_cart(self, line: CartLine) -> None:
        """
        Add a line, merging into the existing line for the same product.

        Merging adds ``line.quantity`` to the existing line; the cart never
        holds two lines for one product.
        """
        existing = next((i for i in self._items if i.product_id == line.product_id), None)

        if existing:
            existing.quantity += line.quantity
        else:
            self._items.append(line.model_copy(deep=True))

        self._changed()
        product_id, quantity = line.product_id, line.quantity
        self._sync(product_id, "add", lambda: self.remote.add_item(product_id, quantity))

    def add_product(self, product: ProductView, quantity: int = 1) -> None:
        """Add a product snapshot to the cart"""
        self.add_to_cart(CartLine.for_product(str(uuid.uuid4()), product, quantity))

    def update_quantity(self, line_id: str, quantity: int) -> None:
        """Set a line's quantity; quantities below 1 and unknown lines are ignored"""
        if quantity < 1:
            return

        line = self._find(line_id)
        if not line:
            return

        line.quantity = quantity
        self._changed()
        product_id = line.product_id
        self._sync(product_id, "update", lambda: self.remote.update_quantity(product_id, quantity))

    def remove_from_cart(self, line_id: str) -> None:
        """Remove a line; unknown lines are ignored"""
        line = self._find(line_id)
        if not line:
            return

        self._items = [i for i in self._items if i.id != line_id]
        self._changed()
        product_id = line.product_id
        self._sync(product_id, "remove", lambda: self.remote.remove_item(product_id))

    def clear_cart(self) -> None:
        """Empty the local cart after a successful checkout.

        The store clears its own rows as part of placing the order, so no
        remote write is made here.
        """
        self._items = []
        self._changed()

    def get_subtotal(self) -> Decimal:
        """Sum of unit price times quantity over the current lines"""
        return sum((line.unit_price * line.quantity for line in self._items), Decimal("0"))

    # ==================== Local mirror ====================

    def _load(self) -> list[CartLine]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return [CartLine(**item) for item in data.get("items", [])]
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cart mirror {self.path}: {e}")
            return []

    def _save(self) -> None:
        payload = {
            "user_id": self.user_id,
            "items": [line.model_dump(mode="json") for line in self._items],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload), encoding="utf-8")
        os.replace(tmp, self.path)

    def _changed(self) -> None:
        self._version += 1
        self._save()

    # ==================== Remote sync ====================

    def _report(self, error: RemoteSyncError) -> None:
        logger.warning(error.message)
        if self.on_sync_error:
            self.on_sync_error(error)

    async def _call(self, product_id: str, operation: str, call: RemoteCall) -> None:
        try:
            await call()
        except Exception as e:
            self._report(RemoteSyncError(
                f"Could not {operation} product {product_id} in remote cart: {e}",
                operation=operation,
                product_id=product_id,
            ))

    async def _run_after(
        self,
        previous: Optional[asyncio.Task],
        product_id: str,
        operation: str,
        call: RemoteCall,
    ) -> None:
        if previous is not None:
            await asyncio.wait([previous])
        await self._call(product_id, operation, call)

    def _chain(self, loop: asyncio.AbstractEventLoop, product_id: str, operation: str, call: RemoteCall) -> None:
        """Queue a remote write behind the last one for the same product"""
        previous = self._pending.get(product_id)
        task = loop.create_task(self._run_after(previous, product_id, operation, call))
        self._pending[product_id] = task

        def _done(finished: asyncio.Task) -> None:
            if self._pending.get(product_id) is finished:
                del self._pending[product_id]

        task.add_done_callback(_done)

    def _release_deferred(self, loop: asyncio.AbstractEventLoop, product_id: Optional[str] = None) -> None:
        """Move writes held from before the loop started onto their product chains"""
        held = [d for d in self._deferred if product_id is None or d[0] == product_id]
        if not held:
            return
        self._deferred = [d for d in self._deferred if d not in held]
        for entry in held:
            self._chain(loop, *entry)

    def _sync(self, product_id: str, operation: str, call: RemoteCall) -> None:
        """Dispatch a remote write behind any earlier write for the same product"""
        if self.remote is None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop yet: hold the write until one is running
            self._deferred.append((product_id, operation, call))
            return

        self._release_deferred(loop, product_id)
        self._chain(loop, product_id, operation, call)

    @property
    def has_pending_sync(self) -> bool:
        return bool(self._pending or self._deferred)

    async def flush(self) -> None:
        """Wait until every dispatched remote write has finished"""
        self._release_deferred(asyncio.get_running_loop())

        while self._pending:
            await asyncio.wait(list(self._pending.values()))

    # ==================== Session ====================

    def _replace(self, lines: list[CartLine]) -> None:
        self._items = [line.model_copy(deep=True) for line in lines]
        self._save()

    async def refresh(self, attempts: int = 3) -> bool:
        """
        Replace the local cart with the remote one.

        A fetch that overlaps a local change is thrown away: the change is
        flushed and the cart fetched again, up to ``attempts`` times.

        Returns:
            True if the local cart was replaced
        """
        if self.remote is None:
            return False

        for _ in range(attempts):
            version = self._version
            lines = await self.remote.fetch_cart()
            if version == self._version:
                self._replace(lines)
                return True
            await self.flush()

        logger.info(f"Cart for {self.user_id} kept changing during refresh, keeping local copy")
        return False

    async def start_session(self) -> None:
        """
        Load the remote cart at session start.

        Outstanding local writes are sent first; the remote cart then
        replaces the local one. If the remote offers a change feed, changes
        made by other sessions trigger another refresh.
        """
        if self.remote is None:
            return

        await self.flush()
        await self.refresh()
        logger.info(f"Cart session started for {self.user_id}: {len(self._items)} line(s)")

        watch = getattr(self.remote, "watch", None)
        if watch is not None and self._unwatch is None:
            self._unwatch = watch(self._on_remote_change)

    def _on_remote_change(self, event: ChangeEvent) -> None:
        if event.origin is not None and event.origin == self.remote.client_id:
            return

        logger.debug(f"Remote cart {event.kind.value} from another session, refreshing")
        if self._refresh_task is not None and not self._refresh_task.done():
            # A burst of changes collapses into one more refresh
            self._refresh_again = True
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._refresh_task = loop.create_task(self._follow_remote())

    async def _follow_remote(self) -> None:
        while True:
            self._refresh_again = False
            await self.flush()
            try:
                await self.refresh()
            except Exception as e:
                self._report(RemoteSyncError(f"Could not refresh cart: {e}", operation="refresh", product_id=""))
            if not self._refresh_again:
                return

    async def close(self) -> None:
        """Stop following remote changes and flush outstanding writes"""
        if self._unwatch is not None:
            self._unwatch()
            self._unwatch = None
        if self._refresh_task is not None:
            await asyncio.wait([self._refresh_task])
            self._refresh_task = None
        await self.flush()
