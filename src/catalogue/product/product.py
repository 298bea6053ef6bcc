"""Product records as served by the marketplace backend.

The catalogue is owned by the backend; these models are the client's view of
it. Carts copy what they need from a ``Product`` at add time.
"""

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    seller_id: str | None = None
    title: str
    description: str | None = None
    price: float = Field(ge=0)
    category: str | None = None
    image_urls: list[str] = Field(default_factory=list)
    return_policy: str | None = Field(default=None, alias="returnPolicy")
    created_at: str | None = None
    updated_at: str | None = None


class NewProduct(BaseModel):
    """Payload for ``POST /api/products``."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    description: str | None = None
    price: float = Field(gt=0)
    category: str | None = None
    image_urls: list[str] = Field(default_factory=list)
    quantity: int | None = Field(default=None, ge=0)
    return_policy: str | None = Field(default=None, alias="returnPolicy")
