"""Ordering bounded context: Shopping Cart and Checkout.

Owns the persisted cart, the mutations applied to it, the synchronisation of
every view that displays it, and the assembly of the order submitted to the
marketplace backend at checkout.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
