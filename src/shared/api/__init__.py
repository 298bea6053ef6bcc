from shared.api.client import MarketplaceClient
from shared.api.exceptions import ApiError, ApiUnauthorized, ApiUnavailable

__all__ = ["ApiError", "ApiUnauthorized", "ApiUnavailable", "MarketplaceClient"]
