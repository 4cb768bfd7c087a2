from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from gift_finder.catalog.config import StorefrontConfig
from gift_finder.catalog.storefront import CatalogError
from gift_finder.config import GiftFinderConfig
from gift_finder.llm.config import LLMConfig
from gift_finder.recommendations.fallback import fallback_rank
from gift_finder.recommendations.models import (
    GiftCriteria,
    Product,
    RankingOutcome,
    RankingStatus,
    Recommendation,
)
from gift_finder.recommendations.service import DEFAULT_REASON, GiftFinder, enrich

STOREFRONT = StorefrontConfig(domain="gifts.example.com", access_token="sf-token")
CONFIG = GiftFinderConfig(storefront=STOREFRONT, llm=LLMConfig(api_key="test-key", enabled=True))

PRODUCTS = [
    Product(handle="lego-puzzle", title="Lego Puzzle Set", price=900, currency="USD",
            image="https://cdn.example.com/lego.jpg", tags=["kids"]),
    Product(handle="silk-scarf", title="Silk Scarf", price=1500, currency="USD"),
    Product(handle="coffee-mug", title="Coffee Mug", price=300, currency="USD"),
]

CRITERIA = GiftCriteria(interests="lego", recipient="kids", budgetMax=1000)


def _finder(ranker) -> GiftFinder:
    return GiftFinder(CONFIG, fetcher=lambda cfg: list(PRODUCTS), ranker=ranker)


def _expected_fallback():
    return enrich(fallback_rank(PRODUCTS, CRITERIA), PRODUCTS, STOREFRONT)


def test_uses_llm_recommendations_when_ok():
    picks = [Recommendation(handle="silk-scarf", title="Silk Scarf", reason="Elegant.", score=8)]
    finder = _finder(lambda criteria, products, cfg: RankingOutcome.success(picks))

    results = finder.recommend(CRITERIA).results

    assert len(results) == 1
    assert results[0].handle == "silk-scarf"
    assert results[0].reason == "Elegant."
    assert results[0].price == 1500
    assert results[0].url == "https://gifts.example.com/products/silk-scarf"


def test_ranker_receives_same_inputs():
    ranker = MagicMock(return_value=RankingOutcome.failure(RankingStatus.unavailable))
    _finder(ranker).recommend(CRITERIA)

    ranker.assert_called_once_with(CRITERIA, PRODUCTS, CONFIG.llm)


@pytest.mark.parametrize("outcome", [
    RankingOutcome.success([]),
    RankingOutcome.failure(RankingStatus.parse_error, "bad json"),
    RankingOutcome.failure(RankingStatus.failed, "timeout"),
    RankingOutcome.failure(RankingStatus.unavailable),
])
def test_falls_back_when_llm_has_nothing(outcome):
    results = _finder(lambda criteria, products, cfg: outcome).recommend(CRITERIA).results

    assert results == _expected_fallback()
    assert results[0].handle == "lego-puzzle"


@patch("gift_finder.llm.groq_client.Groq")
def test_falls_back_when_groq_raises(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("boom")
    finder = GiftFinder(CONFIG, fetcher=lambda cfg: list(PRODUCTS))

    results = finder.recommend(CRITERIA).results

    assert results == _expected_fallback()


def test_catalog_failure_propagates():
    def broken_fetcher(cfg):
        raise CatalogError("storefront down")

    finder = GiftFinder(CONFIG, fetcher=broken_fetcher, ranker=MagicMock())

    with pytest.raises(CatalogError):
        finder.recommend(CRITERIA)


def test_empty_catalog_returns_no_results():
    finder = GiftFinder(
        CONFIG,
        fetcher=lambda cfg: [],
        ranker=lambda criteria, products, cfg: RankingOutcome.failure(RankingStatus.unavailable),
    )

    assert finder.recommend(GiftCriteria()).results == []


# ── Enrichment ───────────────────────────────────────────────────────────


def test_enrich_unknown_handle_degrades():
    results = enrich([Recommendation(handle="ghost", title="Ghost Gift")], PRODUCTS, STOREFRONT)

    assert len(results) == 1
    ghost = results[0]
    assert ghost.title == "Ghost Gift"
    assert ghost.url == "https://gifts.example.com/products/ghost"
    assert ghost.price is None
    assert ghost.image is None
    assert ghost.currency is None
    assert ghost.reason == DEFAULT_REASON
    assert ghost.score == 0


def test_enrich_fills_missing_fields_from_catalog():
    results = enrich([Recommendation(handle="lego-puzzle")], PRODUCTS, STOREFRONT)

    item = results[0]
    assert item.title == "Lego Puzzle Set"
    assert item.image == "https://cdn.example.com/lego.jpg"
    assert item.price == 900
    assert item.currency == "USD"
    assert item.reason == DEFAULT_REASON
