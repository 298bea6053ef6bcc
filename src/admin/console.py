"""Admin dashboard and product moderation.

All figures are aggregated by the backend; this module only fetches them.
Every call needs an admin bearer token and raises ``ApiUnauthorized``
without one.
"""

from typing import Any

import structlog

from catalogue.product.product import Product
from shared.api import MarketplaceClient

logger = structlog.get_logger(__name__)


class AdminConsole:
    def __init__(self, client: MarketplaceClient) -> None:
        self.client = client

    def _get(self, resource: str) -> Any:
        return self.client.get(f"/api/admin/{resource}", auth=True)

    def dashboard(self) -> dict:
        return self._get("dashboard")

    def orders(self) -> list[dict]:
        return self._get("orders") or []

    def pending_products(self) -> list[Product]:
        return [Product.model_validate(item) for item in self._get("products/pending") or []]

    def sales_trends(self) -> list[dict]:
        return self._get("sales-trends") or []

    def buyer_conversion(self) -> dict:
        return self._get("buyer-conversion")

    def top_categories(self) -> list[dict]:
        return self._get("top-categories") or []

    def recent_activities(self) -> list[dict]:
        return self._get("recent-activities") or []

    def approve_product(self, product_id: str) -> Any:
        result = self.client.post(f"/api/admin/products/{product_id}/approve", auth=True)
        logger.info("Product approved", product_id=product_id)
        return result

    def reject_product(self, product_id: str, reason: str | None = None) -> Any:
        body = {"reason": reason} if reason else None
        result = self.client.put(f"/api/admin/products/{product_id}/reject", json=body, auth=True)
        logger.info("Product rejected", product_id=product_id, reason=reason)
        return result
