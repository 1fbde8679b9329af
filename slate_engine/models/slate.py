"""
Slate and result models: what the engine hands back to the caller.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .policy import ExplorationPolicy


class SlateLabel(str, Enum):
    BEST = "Best"
    WILDCARD = "Wildcard"
    CLOSE_AND_EASY = "Close & Easy"


class SlateItem(BaseModel):
    """One ranked entry: 1-based priority, 1-3 reasons, and a copy of the factor map."""

    model_config = ConfigDict(frozen=True)

    id: str
    priority: int = Field(ge=1)
    score: float
    reasons: List[str] = Field(min_length=1, max_length=3)
    factor_scores: Dict[str, float]


class Slate(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: SlateLabel
    items: List[SlateItem] = Field(default_factory=list)
    # Category/venue spread in [0, 1]; 0.0 when empty
    diversity: float = Field(default=0.0, ge=0.0, le=1.0)

    @property
    def ids(self) -> List[str]:
        return [i.id for i in self.items]


def slate_overlap(a: Slate, b: Slate) -> float:
    """Jaccard overlap of two slates' item ids; 0.0 when both are empty."""
    ids_a, ids_b = set(a.ids), set(b.ids)
    union = ids_a | ids_b
    return len(ids_a & ids_b) / len(union) if union else 0.0


class PolicyUsed(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    novelty_target: float
    allow_wildcard: bool

    @classmethod
    def from_policy(cls, policy: ExplorationPolicy) -> "PolicyUsed":
        return cls(
            name=policy.name,
            novelty_target=policy.novelty_target,
            allow_wildcard=policy.allow_wildcard,
        )


class RecommendationResult(BaseModel):
    """
    Engine output.

    slates are always Best, Wildcard, Close & Easy in that order (Wildcard may be
    empty). warnings collects collaborator fallbacks; they are never raised.
    """

    slates: List[Slate]
    policy_used: PolicyUsed
    trace_id: str
    cold_start: bool = False
    augmented_count: int = 0
    cancelled: bool = False
    warnings: List[str] = Field(default_factory=list)

    def slate(self, label: SlateLabel) -> Optional[Slate]:
        for s in self.slates:
            if s.label == label:
                return s
        return None

    def overlap(self, a: SlateLabel, b: SlateLabel) -> float:
        """Id overlap between two slates of this result."""
        slate_a, slate_b = self.slate(a), self.slate(b)
        if slate_a is None or slate_b is None:
            return 0.0
        return slate_overlap(slate_a, slate_b)

    def as_label_map(self) -> Dict[str, List[str]]:
        """Slate label → ordered item ids."""
        return {s.label.value: s.ids for s in self.slates}
