"""Checkout assembly: turns the persisted cart and the checkout form into an order.

Flow:
    1. Read the persisted cart and validate it together with the form. Any
       problem raises ValidationError before a request is made.
    2. Map each line to {product_id, quantity, price}; total = Σ price × qty.
    3. POST /api/orders once. On success the order snapshot is kept under
       ``currentOrder`` for the payment step.

The cart is not cleared by submission, successful or not. It is cleared by
``complete()`` once payment has succeeded, or by an explicit cart clear.
"""

import json
from collections.abc import Mapping

import structlog
from protean.exceptions import ValidationError
from pydantic import ValidationError as PydanticValidationError

from ordering.cart.cart import ShoppingCart
from ordering.cart.mutations import item_count, subtotal
from ordering.checkout.order import OrderDraft, OrderLine, OrderSummary, PlacedOrder
from ordering.checkout.shipping import PaymentMethod, ShippingDetails, parse_payment_method
from shared.api import ApiError, MarketplaceClient
from shared.storage import KeyValueStorage, StorageError

logger = structlog.get_logger(__name__)

CURRENT_ORDER_KEY = "currentOrder"

ShippingInput = ShippingDetails | Mapping[str, object]


class CheckoutFailed(Exception):
    """The backend did not create the order. Nothing was stored."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class CheckoutAssembler:
    def __init__(self, cart: ShoppingCart, client: MarketplaceClient, storage: KeyValueStorage) -> None:
        self.cart = cart
        self.client = client
        self.storage = storage

    # -------------------------------------------------------------------
    # Order summary
    # -------------------------------------------------------------------
    def summary(self) -> OrderSummary:
        items = self.cart.store.load().items
        return OrderSummary(item_count=item_count(items), subtotal=subtotal(items))

    # -------------------------------------------------------------------
    # Draft
    # -------------------------------------------------------------------
    def build_draft(
        self,
        shipping: ShippingInput,
        payment_method: PaymentMethod | str = PaymentMethod.MOBILE_MONEY,
    ) -> OrderDraft:
        errors: dict[str, list[str]] = {}

        loaded = self.cart.store.load()
        if not loaded.ok:
            logger.warning("Stored cart is unreadable at checkout", reason=loaded.error)
        if not loaded.items:
            errors["cart"] = ["Cannot check out an empty cart"]

        details = None
        if isinstance(shipping, ShippingDetails):
            details = shipping
        else:
            try:
                details = ShippingDetails.from_form(shipping)
            except ValidationError as exc:
                errors.update(exc.messages)

        try:
            method = parse_payment_method(payment_method)
        except ValidationError as exc:
            errors.update(exc.messages)

        if errors:
            raise ValidationError(errors)

        lines = tuple(
            OrderLine(product_id=str(item.product_id), quantity=item.quantity, price=item.unit_price)
            for item in loaded.items
        )
        return OrderDraft(lines=lines, shipping=details, payment_method=method)

    # -------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------
    def submit(
        self,
        shipping: ShippingInput,
        payment_method: PaymentMethod | str = PaymentMethod.MOBILE_MONEY,
    ) -> PlacedOrder:
        """Validate, send the order-creation request and remember the order."""
        draft = self.build_draft(shipping, payment_method)
        payload = draft.to_payload()

        try:
            data = self.client.post("/api/orders", json=payload, auth=True)
        except ApiError as exc:
            logger.error(
                "Failed to place order",
                status_code=exc.status_code,
                error=exc.message,
                line_count=len(draft.lines),
            )
            raise CheckoutFailed("There was an issue placing your order. Please try again.", cause=exc) from exc

        if not isinstance(data, dict):
            raise CheckoutFailed("The order service returned an unexpected response.")

        # Keep what the payment step needs even if the backend does not echo it
        for key in ("customer_name", "customer_phone", "paymentMethod"):
            data.setdefault(key, payload[key])
        data.setdefault("total", draft.total)

        try:
            order = PlacedOrder.model_validate(data)
        except PydanticValidationError as exc:
            logger.error("Order service response is missing order fields", error=str(exc))
            raise CheckoutFailed("The order service returned an unexpected response.", cause=exc) from exc
        self._remember(data)
        logger.info("Order placed", order_id=order.id, total=order.total, payment_method=draft.payment_method.value)
        return order

    # -------------------------------------------------------------------
    # Current order
    # -------------------------------------------------------------------
    def _remember(self, data: dict) -> None:
        try:
            self.storage.set_item(CURRENT_ORDER_KEY, json.dumps(data, default=str))
        except StorageError as exc:
            logger.error("Cannot persist current order", error=str(exc))

    def current_order(self) -> PlacedOrder | None:
        try:
            raw = self.storage.get_item(CURRENT_ORDER_KEY)
        except StorageError as exc:
            logger.error("Cannot read current order", error=str(exc))
            return None
        if raw is None:
            return None
        try:
            return PlacedOrder.model_validate_json(raw)
        except ValueError:
            logger.warning("Stored current order is unreadable")
            return None

    def complete(self) -> None:
        """Payment succeeded: forget the order and empty the cart."""
        self.storage.remove_item(CURRENT_ORDER_KEY)
        self.cart.clear()

    def abandon(self) -> None:
        """The buyer walked away from payment: forget the order, keep the cart."""
        self.storage.remove_item(CURRENT_ORDER_KEY)
