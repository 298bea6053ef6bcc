import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.store import CartStore
from shared.bus import EventBus
from shared.storage import StorageError
from shared.storage.memory_adapter import MemoryStorage


class FlakyStorage(MemoryStorage):
    """Memory storage whose next ``read_failures`` reads raise StorageError."""

    def __init__(self):
        super().__init__()
        self.read_failures = 0

    def get_item(self, key):
        if self.read_failures:
            self.read_failures -= 1
            raise StorageError("Storage is locked by another process")
        return super().get_item(key)


@pytest.fixture()
def flaky_storage():
    return FlakyStorage()


@pytest.fixture()
def bus():
    return EventBus()


@pytest.fixture()
def cart(storage, bus):
    return ShoppingCart(CartStore(storage), bus)


@pytest.fixture()
def headphones(make_product):
    return make_product("prod-A", "Headphones", 1000.0, category="Electronics")


@pytest.fixture()
def charger(make_product):
    return make_product("prod-B", "Charger", 500.0)


@pytest.fixture()
def events(cart):
    """Every cart event published after the fixture is created."""
    received = []
    cart.subscribe(received.append)
    return received
