"""
Intention and profile models: what the user asked for, and what we know about them.

Intention is per request (structured by an upstream parser). Profile is the
long-lived, optional signal; every profile-dependent feature has a neutral
default when it is absent.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from slate_engine.utils.time import as_utc

from .item import PriceBand


class ExertionLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class SocialContext(str, Enum):
    SOLO = "SOLO"
    WITH_FRIENDS = "WITH_FRIENDS"
    DATE = "DATE"
    FAMILY = "FAMILY"


def _upper(v: Any) -> Any:
    return v.upper() if isinstance(v, str) else v


class TimeWindow(BaseModel):
    """Half-open time window [start, end)."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def normalize_tz(cls, v: datetime) -> datetime:
        return as_utc(v)

    @model_validator(mode="after")
    def start_not_after_end(self):
        if self.start > self.end:
            raise ValueError(
                f"Time window start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )
        return self

    def contains(self, instant: datetime) -> bool:
        instant = as_utc(instant)
        return self.start <= instant < self.end

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0


class Intention(BaseModel):
    """
    Structured intention for one request.

    `now` is the reference instant for "minutes until start"; defaults to window.start.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    primary_goal: str = ""
    window: TimeWindow
    city: Optional[str] = None
    neighborhood: Optional[str] = None
    exertion_level: Optional[ExertionLevel] = None
    social_context: Optional[SocialContext] = None
    budget_band: Optional[PriceBand] = None
    vibe_descriptors: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)
    now: Optional[datetime] = None
    goal_embedding: Optional[List[float]] = None

    normalize_enum_case = field_validator(
        "exertion_level", "social_context", "budget_band", mode="before"
    )(_upper)

    @field_validator("now")
    @classmethod
    def normalize_now(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None

    @property
    def reference_time(self) -> datetime:
        return self.now if self.now is not None else self.window.start

    @property
    def goal_text(self) -> str:
        return self.primary_goal.lower()

    @property
    def vibes(self) -> List[str]:
        return [v.lower() for v in self.vibe_descriptors]


class Profile(BaseModel):
    """Long-lived user signal. All fields optional."""

    model_config = ConfigDict(frozen=True, extra="allow")

    preferred_moods: List[str] = Field(default_factory=list)
    dislikes: List[str] = Field(default_factory=list)
    budget_band: Optional[PriceBand] = None
    social_style: Optional[SocialContext] = None
    max_travel_minutes: Optional[float] = Field(default=None, gt=0)
    preference_vector: Optional[List[float]] = None
    taste_vector_id: Optional[str] = None

    normalize_enum_case = field_validator("budget_band", "social_style", mode="before")(_upper)

    @property
    def has_signal(self) -> bool:
        """True if any field disqualifies cold start."""
        return bool(
            self.preference_vector
            or self.taste_vector_id
            or self.preferred_moods
            or self.budget_band is not None
            or self.social_style is not None
        )


def ensure_intention(intention: Union[Dict[str, Any], Intention]) -> Intention:
    return Intention.model_validate(intention) if isinstance(intention, dict) else intention


def ensure_profile(profile: Union[Dict[str, Any], Profile, None]) -> Optional[Profile]:
    if profile is None:
        return None
    return Profile.model_validate(profile) if isinstance(profile, dict) else profile
