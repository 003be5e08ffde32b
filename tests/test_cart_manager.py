import asyncio
from decimal import Decimal

import pytest

from moodstore.client.cart_manager import CartManager, mirror_path
from moodstore.client.remote import TableCartRemote
from moodstore.core.errors import NotFoundError, RemoteSyncError
from moodstore.database import cart_db
from moodstore.models.cart import CartLine


class RecordingRemote:
    """Remote that records calls, optionally slowed down or failing"""

    def __init__(self, delays=None, fail_on=()):
        self.client_id = "recording"
        self.calls = []
        self.delays = delays or {}
        self.fail_on = set(fail_on)
        self.rows = {}

    async def _maybe_wait(self, key):
        delay = self.delays.get(key, 0)
        if delay:
            await asyncio.sleep(delay)

    async def fetch_cart(self):
        return list(self.rows.values())

    async def add_item(self, product_id, quantity):
        await self._maybe_wait(("add", quantity))
        self.calls.append(("add", product_id, quantity))
        if "add" in self.fail_on:
            raise ConnectionError("store unreachable")

    async def update_quantity(self, product_id, quantity):
        await self._maybe_wait(("update", quantity))
        self.calls.append(("update", product_id, quantity))
        if "update" in self.fail_on:
            raise ConnectionError("store unreachable")

    async def remove_item(self, product_id):
        self.calls.append(("remove", product_id))
        if "remove" in self.fail_on:
            raise ConnectionError("store unreachable")


@pytest.fixture
def local_cart(tmp_path):
    return CartManager(user_id="user-1", state_dir=str(tmp_path))


# ==================== Local behaviour ====================

def test_adding_same_product_merges_quantities(local_cart, hammock):
    for qty in (1, 3, 2):
        local_cart.add_product(hammock, qty)

    assert len(local_cart.items) == 1
    assert local_cart.items[0].quantity == 6
    assert local_cart.count == 6


def test_add_twice_gives_one_line_and_subtotal(local_cart, ten_dollar_product):
    local_cart.add_product(ten_dollar_product, 1)
    local_cart.add_product(ten_dollar_product, 1)

    assert len(local_cart.items) == 1
    assert local_cart.items[0].quantity == 2
    assert local_cart.get_subtotal() == Decimal("20.00")


def test_add_to_cart_keeps_first_line_id(local_cart, hammock):
    first = CartLine.for_product("line-a", hammock, 1)
    second = CartLine.for_product("line-b", hammock, 2)
    local_cart.add_to_cart(first)
    local_cart.add_to_cart(second)

    assert [line.id for line in local_cart.items] == ["line-a"]
    assert local_cart.items[0].quantity == 3


def test_update_quantity_below_one_is_ignored(local_cart, hammock):
    local_cart.add_to_cart(CartLine.for_product("line-a", hammock, 2))

    local_cart.update_quantity("line-a", 0)
    local_cart.update_quantity("line-a", -4)
    assert local_cart.items[0].quantity == 2

    local_cart.update_quantity("line-a", 5)
    assert local_cart.items[0].quantity == 5


def test_update_unknown_line_is_ignored(local_cart, hammock):
    local_cart.add_to_cart(CartLine.for_product("line-a", hammock, 2))
    local_cart.update_quantity("nope", 9)
    assert local_cart.items[0].quantity == 2


def test_remove_unknown_line_is_a_noop(local_cart, hammock):
    local_cart.add_to_cart(CartLine.for_product("line-a", hammock, 1))
    local_cart.remove_from_cart("missing")
    assert len(local_cart.items) == 1

    local_cart.remove_from_cart("line-a")
    assert local_cart.items == []


def test_subtotal_is_recomputed(local_cart, hammock, mug):
    local_cart.add_to_cart(CartLine.for_product("h", hammock, 2))
    local_cart.add_to_cart(CartLine.for_product("m", mug, 1))
    assert local_cart.get_subtotal() == hammock.price * 2 + mug.price

    local_cart.update_quantity("m", 3)
    assert local_cart.get_subtotal() == hammock.price * 2 + mug.price * 3

    local_cart.remove_from_cart("h")
    assert local_cart.get_subtotal() == mug.price * 3

    local_cart.clear_cart()
    assert local_cart.get_subtotal() == Decimal("0")


def test_items_returns_a_copy(local_cart, hammock):
    local_cart.add_product(hammock, 1)
    local_cart.items.clear()
    assert len(local_cart.items) == 1


# ==================== Local mirror ====================

def test_cart_survives_restart(tmp_path, hammock, mug):
    cart = CartManager(user_id="user-1", state_dir=str(tmp_path))
    cart.add_to_cart(CartLine.for_product("h", hammock, 2))
    cart.add_to_cart(CartLine.for_product("m", mug, 1))

    restored = CartManager(user_id="user-1", state_dir=str(tmp_path))
    assert [(line.id, line.quantity) for line in restored.items] == [("h", 2), ("m", 1)]
    assert restored.get_subtotal() == cart.get_subtotal()


def test_mirror_is_scoped_per_user(tmp_path, hammock):
    CartManager(user_id="alice", state_dir=str(tmp_path)).add_product(hammock, 1)

    assert CartManager(user_id="bob", state_dir=str(tmp_path)).items == []
    assert CartManager(state_dir=str(tmp_path)).items == []
    assert mirror_path(str(tmp_path), "alice").exists()
    assert mirror_path(str(tmp_path), None).name == "cart-guest.json"


def test_unreadable_mirror_starts_empty(tmp_path):
    mirror_path(str(tmp_path), "user-1").write_text("{not json", encoding="utf-8")
    assert CartManager(user_id="user-1", state_dir=str(tmp_path)).items == []


# ==================== Remote sync ====================

@pytest.mark.asyncio
async def test_mutations_are_sent_to_remote(tmp_path, hammock):
    remote = RecordingRemote()
    cart = CartManager(user_id="user-1", remote=remote, state_dir=str(tmp_path))

    cart.add_to_cart(CartLine.for_product("h", hammock, 1))
    cart.add_to_cart(CartLine.for_product("x", hammock, 2))
    cart.update_quantity("h", 7)
    cart.remove_from_cart("h")
    await cart.flush()

    assert remote.calls == [
        ("add", hammock.id, 1),
        ("add", hammock.id, 2),
        ("update", hammock.id, 7),
        ("remove", hammock.id),
    ]


@pytest.mark.asyncio
async def test_local_change_is_visible_before_remote_completes(tmp_path, hammock):
    remote = RecordingRemote(delays={("add", 1): 0.05})
    cart = CartManager(user_id="user-1", remote=remote, state_dir=str(tmp_path))

    cart.add_product(hammock, 1)
    assert cart.count == 1
    assert remote.calls == []
    assert cart.has_pending_sync

    await cart.flush()
    assert remote.calls == [("add", hammock.id, 1)]
    assert not cart.has_pending_sync


@pytest.mark.asyncio
async def test_writes_for_one_line_reach_remote_in_call_order(tmp_path, hammock):
    # The first update is slow; it must still land before the second one
    remote = RecordingRemote(delays={("update", 5): 0.05})
    cart = CartManager(user_id="user-1", remote=remote, state_dir=str(tmp_path))
    cart.add_to_cart(CartLine.for_product("h", hammock, 1))

    cart.update_quantity("h", 5)
    cart.update_quantity("h", 3)
    await cart.flush()

    updates = [c for c in remote.calls if c[0] == "update"]
    assert updates == [("update", hammock.id, 5), ("update", hammock.id, 3)]
    assert cart.items[0].quantity == 3


@pytest.mark.asyncio
async def test_remote_failure_is_reported_without_rollback(tmp_path, hammock):
    errors = []
    remote = RecordingRemote(fail_on={"add", "update"})
    cart = CartManager(
        user_id="user-1",
        remote=remote,
        state_dir=str(tmp_path),
        on_sync_error=errors.append,
    )

    cart.add_to_cart(CartLine.for_product("h", hammock, 2))
    cart.update_quantity("h", 4)
    await cart.flush()

    assert cart.items[0].quantity == 4
    assert [e.operation for e in errors] == ["add", "update"]
    assert all(isinstance(e, RemoteSyncError) for e in errors)
    assert errors[0].product_id == hammock.id


def test_writes_without_event_loop_wait_for_flush(tmp_path, hammock):
    remote = RecordingRemote()
    cart = CartManager(user_id="user-1", remote=remote, state_dir=str(tmp_path))

    cart.add_product(hammock, 2)
    assert remote.calls == []
    assert cart.has_pending_sync

    asyncio.run(cart.flush())
    assert remote.calls == [("add", hammock.id, 2)]


# ==================== Session with the store ====================

@pytest.mark.asyncio
async def test_start_session_replaces_local_cart(tmp_path, hammock, mug):
    cart_db.add_item("user-1", mug.id, 4)
    remote = TableCartRemote("user-1")
    cart = CartManager(user_id="user-1", remote=None, state_dir=str(tmp_path))
    cart.add_product(hammock, 1)

    cart.remote = remote
    await cart.start_session()

    assert [(line.product_id, line.quantity) for line in cart.items] == [(mug.id, 4)]
    await cart.close()


@pytest.mark.asyncio
async def test_table_remote_round_trip(tmp_path, hammock):
    remote = TableCartRemote("user-1")
    cart = CartManager(user_id="user-1", remote=remote, state_dir=str(tmp_path))
    await cart.start_session()

    cart.add_product(hammock, 1)
    cart.add_product(hammock, 2)
    await cart.flush()

    rows = cart_db.get_cart("user-1")
    assert [(r.product_id, r.quantity) for r in rows] == [(hammock.id, 3)]

    cart.update_quantity(cart.items[0].id, 5)
    await cart.flush()
    assert cart_db.get_cart("user-1")[0].quantity == 5

    cart.remove_from_cart(cart.items[0].id)
    await cart.flush()
    assert cart_db.get_cart("user-1") == []
    await cart.close()


@pytest.mark.asyncio
async def test_changes_from_other_sessions_refresh_the_cart(tmp_path, hammock, mug):
    remote = TableCartRemote("user-1")
    cart = CartManager(user_id="user-1", remote=remote, state_dir=str(tmp_path))
    await cart.start_session()

    cart.add_product(hammock, 1)
    await cart.flush()

    # Another device adds a mug
    cart_db.add_item("user-1", mug.id, 2, origin="other-device")
    await cart.close()

    assert {(line.product_id, line.quantity) for line in cart.items} == {(hammock.id, 1), (mug.id, 2)}


@pytest.mark.asyncio
async def test_own_writes_do_not_trigger_refresh(tmp_path, hammock):
    remote = TableCartRemote("user-1")
    cart = CartManager(user_id="user-1", remote=remote, state_dir=str(tmp_path))
    await cart.start_session()

    cart.add_to_cart(CartLine.for_product("local-id", hammock, 1))
    await cart.close()

    # Line keeps its local id because no refresh replaced it
    assert [line.id for line in cart.items] == ["local-id"]


class StoreRemote(RecordingRemote):
    """Recording remote that keeps rows and answers fetches from a slow snapshot"""

    def __init__(self, products, fetch_delay=0.0):
        super().__init__()
        self.products = {p.id: p for p in products}
        self.fetch_delay = fetch_delay
        self.fetches = 0

    async def fetch_cart(self):
        self.fetches += 1
        snapshot = [line.model_copy(deep=True) for line in self.rows.values()]
        if self.fetch_delay:
            await asyncio.sleep(self.fetch_delay)
        return snapshot

    async def add_item(self, product_id, quantity):
        await super().add_item(product_id, quantity)
        self.rows[product_id] = self.rows.get(product_id) or CartLine(
            id=f"row-{product_id}",
            product_id=product_id,
            quantity=quantity,
            unit_price=Decimal("1.00"),
            product=self.products[product_id],
        )


class CountingTableRemote(TableCartRemote):
    def __init__(self, user_id):
        super().__init__(user_id)
        self.fetches = 0

    async def fetch_cart(self):
        self.fetches += 1
        return await super().fetch_cart()


def test_write_held_before_loop_stays_ahead_of_later_writes(tmp_path, hammock):
    remote = RecordingRemote(delays={("add", 1): 0.05})
    cart = CartManager(user_id="user-1", remote=remote, state_dir=str(tmp_path))

    # Added at startup, before any event loop runs
    cart.add_product(hammock, 1)
    line_id = cart.items[0].id

    async def edit_in_loop():
        cart.update_quantity(line_id, 5)
        await cart.flush()

    asyncio.run(edit_in_loop())

    assert [c[0] for c in remote.calls] == ["add", "update"]
    assert remote.calls[-1] == ("update", hammock.id, 5)
    assert not cart.has_pending_sync


@pytest.mark.asyncio
async def test_refresh_keeps_changes_made_while_fetching(tmp_path, hammock, mug):
    remote = StoreRemote([hammock, mug], fetch_delay=0.05)
    cart = CartManager(user_id="user-1", remote=remote, state_dir=str(tmp_path))

    refreshing = asyncio.create_task(cart.refresh())
    await asyncio.sleep(0)
    cart.add_product(mug, 1)

    assert await refreshing is True
    assert [line.product_id for line in cart.items] == [mug.id]
    # The stale fetch was discarded and the cart fetched again
    assert remote.fetches == 2


@pytest.mark.asyncio
async def test_burst_of_remote_changes_is_coalesced(tmp_path, hammock, mug):
    cart_db.add_item("user-1", hammock.id, 1)
    cart_db.add_item("user-1", mug.id, 1)
    remote = CountingTableRemote("user-1")
    cart = CartManager(user_id="user-1", remote=remote, state_dir=str(tmp_path))
    await cart.start_session()
    assert remote.fetches == 1

    # Checkout on another device deletes both rows, one event each
    cart_db.clear_cart("user-1", origin="other-device")
    await cart.close()

    # Both deletes landed before the refresh ran, so one fetch covers them
    assert remote.fetches == 2
    assert cart.items == []

    # Closed sessions stop following the store
    cart_db.add_item("user-1", hammock.id, 1, origin="other-device")
    assert remote.fetches == 2


def test_unknown_product_leaves_no_remote_row(tmp_path):
    remote = TableCartRemote("user-1")
    with pytest.raises(NotFoundError):
        asyncio.run(remote.add_item("no-such-product", 1))
    assert cart_db.table.select() == []
