from __future__ import annotations

from dataclasses import dataclass, field

from .catalog.config import StorefrontConfig
from .llm.config import LLMConfig


@dataclass(frozen=True)
class GiftFinderConfig:
    storefront: StorefrontConfig = field(default_factory=StorefrontConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)


def load_config() -> GiftFinderConfig:
    """Build the service configuration from environment defaults."""
    return GiftFinderConfig()
