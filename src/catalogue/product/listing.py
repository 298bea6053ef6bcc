"""Product browsing and vendor product creation."""

import structlog

from catalogue.product.product import NewProduct, Product
from shared.api import MarketplaceClient

logger = structlog.get_logger(__name__)


class ProductCatalogue:
    def __init__(self, client: MarketplaceClient) -> None:
        self.client = client

    def list_products(self, category: str | None = None, seller_id: str | None = None) -> list[Product]:
        data = self.client.get(
            "/api/products",
            params={"category": category, "seller_id": seller_id},
            auth=True,
        )
        return [Product.model_validate(item) for item in data or []]

    def get_product(self, product_id: str) -> Product:
        return Product.model_validate(self.client.get(f"/api/products/{product_id}"))

    def create_product(self, product: NewProduct) -> Product:
        """Create a product for the signed-in vendor. It starts pending approval."""
        data = self.client.post(
            "/api/products",
            json=product.model_dump(by_alias=True, exclude_none=True),
            auth=True,
        )
        created = Product.model_validate(data)
        logger.info("Product created", product_id=created.id, title=created.title)
        return created
