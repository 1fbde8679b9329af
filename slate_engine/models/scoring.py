"""
Scoring model — ScoredItem, a candidate with its score and factor map.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from .item import CandidateItem


class ScoredItem(BaseModel):
    """
    A candidate with its scoring components.

    base_score is the weighted factor sum; score is the post-debias value
    (equal to base_score until the debiaser runs). factor_scores is kept in the
    active mode's convention and is never discarded.
    """

    model_config = ConfigDict(frozen=True)

    item: CandidateItem
    base_score: float
    score: float
    factor_scores: Dict[str, float] = Field(default_factory=dict)
    augmented: bool = False

    @property
    def id(self) -> str:
        return self.item.id
