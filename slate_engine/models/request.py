"""
Request model: the in-process call contract for one ranking call.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .intention import Intention, Profile
from .item import CandidateItem
from .policy import ExplorationLevel
from .weights import FeatureWeights


class RecommendationRequest(BaseModel):
    """
    Everything one call needs. Dicts are accepted for every nested model.

    user_id is only used for the persisted-policy lookup.
    """

    candidates: List[CandidateItem] = Field(default_factory=list)
    intention: Intention
    profile: Optional[Profile] = None
    exploration_level: ExplorationLevel = ExplorationLevel.MEDIUM
    weights: FeatureWeights
    trace_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    user_id: Optional[str] = None

    @field_validator("exploration_level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v
