"""Keeping every view's cart display consistent with the persisted cart.

Within one process all views share the cart's event bus, so a mutation made
anywhere reaches every subscriber on the same call. Polling is used only
for what the bus cannot see: writes made by another writer sharing the same
storage (another tab, another process). ``CartSynchronizer.check()`` compares
the stored value with the last value this cart wrote or read, and reloads
when they differ. ``run()`` repeats that check every interval.
"""

import asyncio
from collections.abc import Callable

import structlog

from ordering.cart.cart import ShoppingCart
from ordering.cart.events import CartEvent
from shared.storage import StorageError

logger = structlog.get_logger(__name__)

DEFAULT_SYNC_INTERVAL = 1.0


class CartBadge:
    """The navigation badge: total units in the cart.

    The count is the sum of quantities across lines, not the number of
    distinct lines.
    """

    def __init__(self, cart: ShoppingCart, on_change: Callable[[int], None] | None = None) -> None:
        self.count = cart.item_count
        self.on_change = on_change
        self._unsubscribe = cart.subscribe(self._handle)

    def _handle(self, event: CartEvent) -> None:
        count = event.item_count
        if count == self.count:
            return
        self.count = count
        if self.on_change is not None:
            self.on_change(count)

    def close(self) -> None:
        self._unsubscribe()


class CartSynchronizer:
    def __init__(self, cart: ShoppingCart, interval: float = DEFAULT_SYNC_INTERVAL) -> None:
        self.cart = cart
        self.interval = interval

    def check(self) -> bool:
        """Reload the cart if another writer changed it. Returns True on reload."""
        try:
            raw = self.cart.store.raw()
        except StorageError as exc:
            logger.warning("Cannot read cart storage, skipping check", error=str(exc))
            return False
        if raw == self.cart.last_seen_raw:
            return False

        logger.debug("Cart changed by another writer, reloading")
        result = self.cart.reload()
        if not result.ok:
            logger.warning("Reloaded cart is unreadable", reason=result.error)
        return True

    async def run(self) -> None:
        """Check for foreign writes every ``interval`` seconds until cancelled."""
        logger.info("Cart synchronizer started", interval=self.interval)
        try:
            while True:
                self.check()
                await asyncio.sleep(self.interval)
        finally:
            logger.info("Cart synchronizer stopped")
