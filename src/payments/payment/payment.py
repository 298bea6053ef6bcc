"""Payment records returned by the marketplace backend."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class PaymentState(Enum):
    """Where a payment stands from the buyer's point of view."""

    IDLE = "idle"
    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PaymentState.COMPLETED, PaymentState.FAILED)


# Backend status strings -> terminal states. Anything else is still pending.
_TERMINAL_STATUSES = {
    "completed": PaymentState.COMPLETED,
    "successful": PaymentState.COMPLETED,
    "success": PaymentState.COMPLETED,
    "failed": PaymentState.FAILED,
}


class Payment(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    order_id: str
    amount: float
    status: str
    transaction_id: str
    payment_link: str | None = None

    @property
    def state(self) -> PaymentState:
        return _TERMINAL_STATUSES.get(self.status.lower(), PaymentState.POLLING)
