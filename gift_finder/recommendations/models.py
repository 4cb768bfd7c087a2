from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = ""
    handle: str
    title: str = ""
    vendor: str = ""
    type: str = ""
    tags: list[str] = Field(default_factory=list)
    description: str = ""
    price: float = Field(default=0.0, ge=0.0)
    currency: str = "INR"
    image: str | None = None


class GiftCriteria(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipient: str | None = None
    occasion: str | None = None
    interests: str | None = Field(
        default=None, description="Comma or space separated keywords"
    )
    # Any JSON value; coerced by parse_budget() in the ranker.
    budget_min: Any = Field(default=None, alias="budgetMin")
    budget_max: Any = Field(default=None, alias="budgetMax")


class Recommendation(BaseModel):
    handle: str
    title: str | None = None
    reason: str | None = None
    score: float | None = None


class EnrichedResult(BaseModel):
    handle: str
    title: str | None = None
    url: str
    image: str | None = None
    price: float | None = None
    currency: str | None = None
    reason: str
    score: float = 0.0


class GiftFinderResponse(BaseModel):
    results: list[EnrichedResult]


class RankingStatus(str, Enum):
    ok = "ok"
    empty = "empty"
    parse_error = "parse_error"
    unavailable = "unavailable"
    failed = "failed"


@dataclass(frozen=True)
class RankingOutcome:
    """Result of one AI ranking attempt. Only ``ok`` carries recommendations."""

    status: RankingStatus
    recommendations: list[Recommendation] = field(default_factory=list)
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is RankingStatus.ok and bool(self.recommendations)

    @classmethod
    def success(cls, recommendations: list[Recommendation]) -> RankingOutcome:
        if not recommendations:
            return cls(RankingStatus.empty)
        return cls(RankingStatus.ok, list(recommendations))

    @classmethod
    def failure(cls, status: RankingStatus, detail: str | None = None) -> RankingOutcome:
        return cls(status, [], detail)
