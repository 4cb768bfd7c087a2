from __future__ import annotations

import json
import logging
from typing import Any

from groq import Groq
from pydantic import ValidationError

from ..recommendations.models import (
    GiftCriteria,
    Product,
    RankingOutcome,
    RankingStatus,
    Recommendation,
)
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an ecommerce gift assistant. Output valid JSON only."

INSTRUCTIONS = [
    "Pick the BEST 3 products from the list.",
    "Prefer diversity (type/brand).",
    "Respect budget if given; allow +/- 25%.",
    'Return JSON only: {"recommendations":[{"handle":"<handle-from-list>",'
    '"title":"...","reason":"...","score":<number>}]}',
]


def build_prompt(criteria: GiftCriteria, products: list[Product]) -> dict[str, Any]:
    """Build the JSON payload sent to the model as the user message."""
    return {
        "criteria": {
            "recipient": criteria.recipient,
            "occasion": criteria.occasion,
            "interests": criteria.interests,
            "budgetMin": criteria.budget_min,
            "budgetMax": criteria.budget_max,
        },
        "instructions": INSTRUCTIONS,
        "products": [p.model_dump() for p in products],
        "handles": [p.handle for p in products],
    }


def parse_recommendations(content: str, limit: int = 3) -> RankingOutcome:
    """
    Turn raw model output into a RankingOutcome.

    Entries that are not objects or have no handle are dropped; the
    remaining ones are capped at ``limit``.
    """
    try:
        parsed = json.loads(content)
    except (TypeError, ValueError):
        return RankingOutcome.failure(RankingStatus.parse_error, "content is not JSON")

    if not isinstance(parsed, dict):
        return RankingOutcome.failure(RankingStatus.parse_error, "content is not a JSON object")

    items = parsed.get("recommendations", [])
    if items is None:
        items = []
    if not isinstance(items, list):
        return RankingOutcome.failure(
            RankingStatus.parse_error, "recommendations is not a list",
        )

    recommendations: list[Recommendation] = []
    for item in items:
        if not isinstance(item, dict):
            logger.debug("Skipping non-object recommendation: %r", item)
            continue
        try:
            rec = Recommendation.model_validate(item)
        except ValidationError:
            logger.debug("Skipping invalid recommendation: %r", item)
            continue
        if rec.handle:
            recommendations.append(rec)

    return RankingOutcome.success(recommendations[:limit])


def rank_with_llm(
    criteria: GiftCriteria,
    products: list[Product],
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> RankingOutcome:
    """
    Ask Groq to pick the best gifts from the product list.

    Never raises: disabled config, API errors, timeouts and malformed
    output are all reported through the outcome status.
    """
    if not config.enabled or not config.api_key:
        return RankingOutcome.failure(RankingStatus.unavailable, "LLM disabled or no API key")

    if not products:
        return RankingOutcome.failure(RankingStatus.unavailable, "no products to rank")

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": json.dumps(build_prompt(criteria, products)),
                },
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content or "{}"
    except Exception as exc:
        logger.warning("Groq LLM call failed, falling back to heuristic ranking", exc_info=True)
        return RankingOutcome.failure(RankingStatus.failed, str(exc))

    logger.debug("Groq content: %s", content[:300])
    return parse_recommendations(content, limit=config.max_recommendations)
