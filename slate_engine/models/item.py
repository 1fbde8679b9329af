"""
Candidate item model: one recommendable activity instance.

Built fresh per ranking call by the retrieval collaborator (or from dicts via
CandidateItem.model_validate). Immutable within the call; never persisted here.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from slate_engine.utils.time import as_utc


class Category(str, Enum):
    MUSIC = "MUSIC"
    FOOD = "FOOD"
    COMEDY = "COMEDY"
    ARTS = "ARTS"
    THEATRE = "THEATRE"
    FAMILY = "FAMILY"
    DANCE = "DANCE"
    FITNESS = "FITNESS"
    NETWORKING = "NETWORKING"
    WELLNESS = "WELLNESS"
    OTHER = "OTHER"


class PriceBand(str, Enum):
    """Ordered price band: FREE < LOW < MID < HIGH < LUXE."""

    FREE = "FREE"
    LOW = "LOW"
    MID = "MID"
    HIGH = "HIGH"
    LUXE = "LUXE"

    @property
    def rank(self) -> int:
        return _PRICE_RANK[self]


_PRICE_RANK = {
    PriceBand.FREE: 0,
    PriceBand.LOW: 1,
    PriceBand.MID: 2,
    PriceBand.HIGH: 3,
    PriceBand.LUXE: 4,
}


def price_band_from_prices(
    price_min: Optional[float],
    price_max: Optional[float],
) -> Optional[PriceBand]:
    """
    Derive a price band from a min/max price pair.

    Both absent → None. A zero minimum with no (or zero) maximum is FREE.
    Otherwise the band comes from the average of min and max:
    < 20 LOW, < 60 MID, < 120 HIGH, else LUXE.
    """
    if price_min is None and price_max is None:
        return None
    if price_min == 0 and not price_max:
        return PriceBand.FREE
    low = price_min or 0
    # A zero or missing maximum falls back to the minimum
    high = price_max or price_min or 0
    avg = (low + high) / 2
    if avg < 20:
        return PriceBand.LOW
    if avg < 60:
        return PriceBand.MID
    if avg < 120:
        return PriceBand.HIGH
    return PriceBand.LUXE


class PopularityCounters(BaseModel):
    """Lifetime and recent-window (24h) exposure counters. Missing counters are 0."""

    model_config = ConfigDict(frozen=True)

    views: int = 0
    saves: int = 0
    shares: int = 0
    clicks: int = 0
    views_24h: int = 0
    saves_24h: int = 0

    @field_validator("*", mode="before")
    @classmethod
    def none_is_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @property
    def recent_exposure(self) -> int:
        """Recent-window view + save count; the popularity used for debiasing."""
        return self.views_24h + self.saves_24h


class CandidateItem(BaseModel):
    """
    Candidate activity used across the pipeline stages.

    price_band is derived from price_min/price_max when not supplied; an explicit
    band wins. travel_minutes and novelty are optional precomputed signals.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    title: str
    category: Category = Category.OTHER
    start: datetime
    end: Optional[datetime] = None
    venue_name: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    price_band: Optional[PriceBand] = None
    tags: List[str] = Field(default_factory=list)
    popularity: PopularityCounters = Field(default_factory=PopularityCounters)
    embedding_ref: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    travel_minutes: Optional[float] = None
    novelty: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @field_validator("category", mode="before")
    @classmethod
    def upper_category(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("price_band", mode="before")
    @classmethod
    def upper_price_band(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("start", "end")
    @classmethod
    def normalize_tz(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None

    @field_validator("popularity", mode="before")
    @classmethod
    def popularity_or_default(cls, v: Any) -> Any:
        return {} if v is None else v

    @model_validator(mode="before")
    @classmethod
    def derive_price_band(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("price_band") is None:
            band = price_band_from_prices(data.get("price_min"), data.get("price_max"))
            if band is not None:
                data = {**data, "price_band": band}
        return data

    @property
    def has_venue(self) -> bool:
        return bool(self.venue_name and self.venue_name.strip())

    def text_blob(self) -> str:
        """Lower-cased title + tags for keyword matching."""
        return " ".join([self.title.lower()] + [t.lower() for t in self.tags])


def ensure_candidates(items: List[Union[Dict[str, Any], "CandidateItem"]]) -> List["CandidateItem"]:
    """Convert list of dicts or CandidateItems to CandidateItem models."""
    return [
        CandidateItem.model_validate(i) if isinstance(i, dict) else i
        for i in items
    ]
