"""
Deterministic fallback ranking.

Used whenever the AI ranker is unavailable or returns nothing usable.
Scores each candidate by keyword overlap with the gift criteria and by
budget fit, then keeps the top three. Pure and reentrant: no I/O, no state.
"""
from __future__ import annotations

import math
import re
from typing import Any

from .models import GiftCriteria, Product, Recommendation

BUDGET_MARGIN = 0.25
MAX_RESULTS = 3
FALLBACK_REASON = "Matched your interests/budget"

KEYWORD_POINTS = 2
RECIPIENT_POINTS = 1
OCCASION_POINTS = 1
STRICT_BUDGET_POINTS = 1

_TOKEN_SPLIT = re.compile(r"[,\s]+")


def tokenize_interests(interests: str | None) -> list[str]:
    """Lower-case and split free text on commas and whitespace."""
    if not interests:
        return []
    return [t for t in _TOKEN_SPLIT.split(str(interests).lower()) if t]


def parse_budget(value: Any, default: float) -> float:
    """
    Coerce a budget bound to a float.

    Missing, non-numeric, NaN and infinite values map to ``default``.
    Zero maps to ``default`` too, so an unset ``budgetMax`` of 0 means
    "no upper bound" and a ``budgetMin`` of 0 stays 0.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number) or number == 0:
        return default
    return number


def _within_soft_budget(price: float, low: float, high: float) -> bool:
    if price < low * (1 - BUDGET_MARGIN):
        return False
    return math.isinf(high) or price <= high * (1 + BUDGET_MARGIN)


def _searchable_text(product: Product) -> str:
    parts = [
        product.title,
        product.vendor,
        product.type,
        " ".join(product.tags or []),
        product.description,
    ]
    return " ".join(p or "" for p in parts).lower()


def _score_product(
    product: Product,
    keywords: list[str],
    recipient: str,
    occasion: str,
    low: float,
    high: float,
) -> int:
    text = _searchable_text(product)
    score = 0
    for word in keywords:
        if word in text:
            score += KEYWORD_POINTS
    if recipient and recipient in text:
        score += RECIPIENT_POINTS
    if occasion and occasion in text:
        score += OCCASION_POINTS
    if not math.isinf(high) and low <= product.price <= high:
        score += STRICT_BUDGET_POINTS
    return score


def fallback_rank(
    products: list[Product],
    criteria: GiftCriteria | None = None,
) -> list[Recommendation]:
    """
    Rank products against the criteria and return at most three picks.

    Products inside a +/-25% band around the budget form the candidate
    pool; when none qualify, the whole list is ranked instead. Ties on
    score go to the cheaper product, then to catalog order.
    """
    criteria = criteria or GiftCriteria()
    keywords = tokenize_interests(criteria.interests)
    recipient = (criteria.recipient or "").lower()
    occasion = (criteria.occasion or "").lower()
    low = parse_budget(criteria.budget_min, 0.0)
    high = parse_budget(criteria.budget_max, math.inf)

    base = [p for p in products if _within_soft_budget(p.price, low, high)]
    pool = base or list(products)

    scored = [
        (_score_product(p, keywords, recipient, occasion, low, high), p)
        for p in pool
    ]
    scored.sort(key=lambda item: (-item[0], item[1].price))

    return [
        Recommendation(
            handle=product.handle,
            title=product.title,
            reason=FALLBACK_REASON,
            score=score,
        )
        for score, product in scored[:MAX_RESULTS]
    ]
