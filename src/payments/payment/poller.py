"""Payment status poller: follows one payment from initiation to a terminal state.

State machine:
    idle → submitted        start(): POST /api/indirect_payment
    submitted → polling     first status check fires immediately after start
    polling → polling       check(): GET /api/verify_payment/{transaction_id}
    polling → completed     backend reports completed / successful
    polling → failed        backend reports failed

Checks are driven by the caller; each is a single request with no retry.
``poll_until_settled()`` is a convenience loop for callers that want a
fixed-interval poll. ``abandon()`` marks the poll as left behind: results
that arrive afterwards are ignored instead of updating state.
"""

import time
from collections.abc import Callable

import structlog
from protean.exceptions import InvalidOperationError

from ordering.checkout.order import PlacedOrder
from payments.payment.payment import Payment, PaymentState
from shared.api import ApiError, MarketplaceClient

logger = structlog.get_logger(__name__)


class PaymentStatusPoller:
    def __init__(self, client: MarketplaceClient) -> None:
        self.client = client
        self.state = PaymentState.IDLE
        self.payment: Payment | None = None
        self.error: str | None = None
        self.abandoned = False
        self.checks = 0

    @property
    def payment_link(self) -> str | None:
        """Hosted payment page to send the buyer to, if the backend gave one."""
        return self.payment.payment_link if self.payment else None

    def start(
        self,
        order: PlacedOrder,
        customer_name: str | None = None,
        customer_phone: str | None = None,
        redirect_url: str | None = None,
    ) -> PaymentState:
        """Initiate payment for ``order`` and run the first status check."""
        if self.state != PaymentState.IDLE:
            raise InvalidOperationError(f"Payment already started (state {self.state.value})")

        body = {
            "order_id": order.id,
            "name": customer_name or order.customer_name,
            "phone": customer_phone or order.customer_phone,
        }
        if redirect_url:
            body["redirect_url"] = redirect_url

        try:
            data = self.client.post("/api/indirect_payment", json=body, auth=True)
        except ApiError as exc:
            self.error = exc.message
            logger.error("Failed to initiate payment", order_id=order.id, error=exc.message)
            raise

        self.payment = Payment.model_validate(data)
        self.state = PaymentState.SUBMITTED
        self.error = None
        logger.info(
            "Payment initiated",
            order_id=order.id,
            transaction_id=self.payment.transaction_id,
            has_link=self.payment.payment_link is not None,
        )
        return self.check()

    def check(self) -> PaymentState:
        """Ask the backend once for the payment's status."""
        if self.state.is_terminal or self.abandoned:
            return self.state
        if self.payment is None:
            raise InvalidOperationError("No payment to check; call start() first")

        transaction_id = self.payment.transaction_id
        self.checks += 1
        try:
            data = self.client.get(f"/api/verify_payment/{transaction_id}", auth=True)
        except ApiError as exc:
            if not self.abandoned:
                self.error = exc.message
            logger.warning("Payment status check failed", transaction_id=transaction_id, error=exc.message)
            raise

        if self.abandoned:
            logger.debug("Ignoring status for abandoned payment", transaction_id=transaction_id)
            return self.state

        payment = Payment.model_validate(data)
        # Verification responses may omit the hosted page link
        if payment.payment_link is None and self.payment.payment_link:
            payment = payment.model_copy(update={"payment_link": self.payment.payment_link})
        self.payment = payment
        self.error = None
        self.state = self.payment.state
        if self.state.is_terminal:
            logger.info("Payment settled", transaction_id=transaction_id, state=self.state.value)
        return self.state

    def poll_until_settled(
        self,
        interval: float = 2.0,
        max_checks: int = 30,
        sleep: Callable[[float], None] = time.sleep,
    ) -> PaymentState:
        """Re-check every ``interval`` seconds until terminal or ``max_checks`` is spent."""
        remaining = max_checks
        while not self.state.is_terminal and not self.abandoned and remaining > 0:
            sleep(interval)
            self.check()
            remaining -= 1
        return self.state

    def abandon(self) -> None:
        self.abandoned = True
        logger.debug("Payment poll abandoned", state=self.state.value)
