"""Runtime settings for the storefront client.

Values come from environment variables so the same code runs against a local
backend, a staging host, or the test suite's in-memory adapters.
"""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_STORAGE_PATH = ".storefront/storage.json"


@dataclass(frozen=True)
class Settings:
    """Resolved client settings."""

    api_url: str = DEFAULT_API_URL
    api_timeout: float = 10.0
    storage_adapter: str = "memory"
    storage_path: Path = Path(DEFAULT_STORAGE_PATH)
    sync_interval: float = 1.0
    image_public_url: str = "http://localhost:9000"
    image_bucket: str = "product-images"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_url=os.environ.get("MARKETPLACE_API_URL", DEFAULT_API_URL).rstrip("/"),
            api_timeout=float(os.environ.get("MARKETPLACE_API_TIMEOUT", "10")),
            storage_adapter=os.environ.get("STOREFRONT_STORAGE", "memory"),
            storage_path=Path(os.environ.get("STOREFRONT_STORAGE_PATH", DEFAULT_STORAGE_PATH)),
            sync_interval=float(os.environ.get("STOREFRONT_SYNC_INTERVAL", "1.0")),
            image_public_url=os.environ.get("IMAGE_PUBLIC_URL", "http://localhost:9000").rstrip("/"),
            image_bucket=os.environ.get("IMAGE_BUCKET_NAME", "product-images"),
        )
