from __future__ import annotations

import logging
from typing import Callable

from ..catalog.config import StorefrontConfig
from ..catalog.storefront import fetch_products
from ..config import GiftFinderConfig
from ..llm.config import LLMConfig
from ..llm.groq_client import rank_with_llm
from .fallback import fallback_rank
from .models import (
    EnrichedResult,
    GiftCriteria,
    GiftFinderResponse,
    Product,
    RankingOutcome,
    Recommendation,
)

logger = logging.getLogger(__name__)

DEFAULT_REASON = "A good match for your criteria"

ProductFetcher = Callable[[StorefrontConfig], list[Product]]
Ranker = Callable[[GiftCriteria, list[Product], LLMConfig], RankingOutcome]


def enrich(
    recommendations: list[Recommendation],
    products: list[Product],
    storefront: StorefrontConfig,
) -> list[EnrichedResult]:
    """Join recommendations back to catalog products by handle."""
    by_handle = {p.handle: p for p in products}
    results: list[EnrichedResult] = []
    for rec in recommendations:
        product = by_handle.get(rec.handle)
        results.append(EnrichedResult(
            handle=rec.handle,
            title=rec.title or (product.title if product else None),
            url=storefront.product_url(rec.handle),
            image=product.image if product else None,
            price=product.price if product else None,
            currency=product.currency if product else None,
            reason=rec.reason or DEFAULT_REASON,
            score=rec.score or 0,
        ))
    return results


class GiftFinder:
    """Fetch catalog, rank with the LLM or the fallback, then enrich."""

    def __init__(
        self,
        config: GiftFinderConfig,
        fetcher: ProductFetcher = fetch_products,
        ranker: Ranker = rank_with_llm,
    ) -> None:
        self.config = config
        self._fetch = fetcher
        self._rank = ranker

    def choose(self, criteria: GiftCriteria, products: list[Product]) -> list[Recommendation]:
        outcome = self._rank(criteria, products, self.config.llm)
        if outcome.ok:
            return outcome.recommendations

        recommendations = fallback_rank(products, criteria)
        logger.info(
            "Using fallback ranking (llm status=%s, detail=%s), count: %d",
            outcome.status.value, outcome.detail, len(recommendations),
        )
        return recommendations

    def recommend(self, criteria: GiftCriteria) -> GiftFinderResponse:
        # Catalog errors propagate; there is nothing to rank without products.
        products = self._fetch(self.config.storefront)
        logger.info(
            "products: %d criteria: %s",
            len(products), criteria.model_dump(by_alias=True),
        )

        recommendations = self.choose(criteria, products)
        return GiftFinderResponse(
            results=enrich(recommendations, products, self.config.storefront),
        )
