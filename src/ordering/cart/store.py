"""Persisted cart store.

The cart lives as one JSON array under the ``cartItems`` key of the
key-value storage; it is the single source of truth for every view. Each
save rewrites the whole snapshot. There is no merge between writers: the
last write wins.

Loading never raises. A missing key is an empty cart; an unreadable value is
reported through ``CartLoadResult`` so the caller decides whether to log,
reset or keep the stale value.
"""

import json
from collections.abc import Sequence
from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from ordering.cart.items import CartLineItem
from shared.storage import KeyValueStorage, StorageError

logger = structlog.get_logger(__name__)

CART_KEY = "cartItems"


@dataclass(frozen=True)
class CartLoadResult:
    """Outcome of reading the persisted cart.

    ``items`` is always usable: on failure it is empty and ``error`` names
    the reason.
    """

    ok: bool
    items: tuple[CartLineItem, ...] = ()
    error: str | None = None

    @classmethod
    def success(cls, items: Sequence[CartLineItem]) -> "CartLoadResult":
        return cls(ok=True, items=tuple(items))

    @classmethod
    def failure(cls, reason: str) -> "CartLoadResult":
        return cls(ok=False, error=reason)


def serialize(items: Sequence[CartLineItem]) -> str:
    return json.dumps([item.to_storage() for item in items], ensure_ascii=False, separators=(",", ":"))


def deserialize(raw: str) -> CartLoadResult:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        return CartLoadResult.failure(f"Stored cart is not valid JSON: {exc.msg}")

    if not isinstance(data, list):
        return CartLoadResult.failure(f"Stored cart must be a list, got {type(data).__name__}")

    items = []
    seen = set()
    for position, entry in enumerate(data):
        if not isinstance(entry, dict):
            return CartLoadResult.failure(f"Cart line {position} is not an object")
        try:
            item = CartLineItem.from_storage(entry)
        except (ValidationError, ValueError, TypeError) as exc:
            return CartLoadResult.failure(f"Cart line {position} is invalid: {exc}")
        if str(item.product_id) in seen:
            return CartLoadResult.failure(f"Cart line {position} duplicates product {item.product_id}")
        seen.add(str(item.product_id))
        items.append(item)

    return CartLoadResult.success(items)


class CartStore:
    """Reads and writes the cart snapshot in key-value storage."""

    def __init__(self, storage: KeyValueStorage, key: str = CART_KEY) -> None:
        self.storage = storage
        self.key = key

    def raw(self) -> str | None:
        """Return the stored value as-is, or None if absent.

        Raises StorageError when the storage cannot be read.
        """
        return self.storage.get_item(self.key)

    def load(self) -> CartLoadResult:
        try:
            raw = self.raw()
        except StorageError as exc:
            return CartLoadResult.failure(str(exc))
        return self.parse(raw)

    def parse(self, raw: str | None) -> CartLoadResult:
        """Interpret a value read by ``raw()``; None is an empty cart."""
        if raw is None:
            return CartLoadResult.success(())
        return deserialize(raw)

    def save(self, items: Sequence[CartLineItem]) -> bool:
        """Overwrite the stored snapshot. Returns False if the write failed."""
        try:
            self.storage.set_item(self.key, serialize(items))
        except StorageError as exc:
            logger.error("Cannot persist cart", key=self.key, line_count=len(items), error=str(exc))
            return False
        return True
