"""Storefront composition root.

Wires one storage, one event bus and one API client into every service, so
all views of a process share the same cart and see each other's changes.
"""

from admin.console import AdminConsole
from catalogue.product.images import ImageUploader
from catalogue.product.listing import ProductCatalogue
from identity.session import Session
from ordering.cart.cart import ShoppingCart
from ordering.cart.store import CartStore
from ordering.cart.sync import CartBadge, CartSynchronizer
from ordering.checkout.assembler import CheckoutAssembler
from ordering.domain import ordering
from payments.payment.poller import PaymentStatusPoller
from shared.api import MarketplaceClient
from shared.bus import EventBus
from shared.config import Settings
from shared.storage import KeyValueStorage, get_storage

_initialized = False


def init_domains() -> None:
    """Initialize the Protean domains once per process."""
    global _initialized
    if not _initialized:
        ordering.init()
        _initialized = True


class Storefront:
    def __init__(
        self,
        settings: Settings | None = None,
        storage: KeyValueStorage | None = None,
        client: MarketplaceClient | None = None,
        bus: EventBus | None = None,
    ) -> None:
        init_domains()

        self.settings = settings or Settings.from_env()
        self.storage = storage or get_storage(self.settings)
        self.bus = bus or EventBus()

        self.session = Session(self.storage)
        self.client = client or MarketplaceClient(
            base_url=self.settings.api_url,
            timeout=self.settings.api_timeout,
        )
        if self.client.token_provider is None:
            self.client.token_provider = lambda: self.session.token
        self.session.client = self.client

        self.catalogue = ProductCatalogue(self.client)
        self.images = ImageUploader(
            self.client,
            public_url=self.settings.image_public_url,
            bucket=self.settings.image_bucket,
        )
        self.admin = AdminConsole(self.client)

        self.cart = ShoppingCart(CartStore(self.storage), self.bus)
        self.badge = CartBadge(self.cart)
        self.synchronizer = CartSynchronizer(self.cart, interval=self.settings.sync_interval)
        self.checkout = CheckoutAssembler(self.cart, self.client, self.storage)

    def payment_poller(self) -> PaymentStatusPoller:
        """A fresh poller for one payment attempt."""
        return PaymentStatusPoller(self.client)

    def close(self) -> None:
        self.badge.close()
        self.client.close()
