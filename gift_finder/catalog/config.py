from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class StorefrontConfig:
    domain: str = os.getenv("SHOPIFY_STOREFRONT_DOMAIN", "")
    access_token: str = os.getenv("SHOPIFY_STOREFRONT_TOKEN", "")
    api_version: str = os.getenv("SHOPIFY_API_VERSION", "2024-04")
    product_count: int = 30
    sort_key: str = "BEST_SELLING"
    description_length: int = 160
    default_currency: str = "INR"
    timeout: float = 10.0

    @property
    def endpoint(self) -> str:
        return f"https://{self.domain}/api/{self.api_version}/graphql.json"

    @property
    def origin(self) -> str:
        return f"https://{self.domain}"

    def product_url(self, handle: str) -> str:
        return f"{self.origin}/products/{handle}"


DEFAULT_STOREFRONT_CONFIG = StorefrontConfig()
