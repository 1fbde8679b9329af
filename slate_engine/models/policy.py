"""
Exploration policy model and the three canonical presets.
"""

from enum import Enum
from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field


class ExplorationLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ExplorationPolicy(BaseModel):
    """A named stance: novelty target in [0, 1] and whether the Wildcard slate is allowed."""

    model_config = ConfigDict(frozen=True)

    name: str
    novelty_target: float = Field(ge=0.0, le=1.0)
    allow_wildcard: bool


CONSERVATIVE = ExplorationPolicy(name="conservative", novelty_target=0.1, allow_wildcard=False)
BALANCED = ExplorationPolicy(name="balanced", novelty_target=0.3, allow_wildcard=True)
ADVENTUROUS = ExplorationPolicy(name="adventurous", novelty_target=0.5, allow_wildcard=True)

POLICY_PRESETS: Dict[ExplorationLevel, ExplorationPolicy] = {
    ExplorationLevel.LOW: CONSERVATIVE,
    ExplorationLevel.MEDIUM: BALANCED,
    ExplorationLevel.HIGH: ADVENTUROUS,
}


def ensure_level(level: Union[str, ExplorationLevel]) -> ExplorationLevel:
    return level if isinstance(level, ExplorationLevel) else ExplorationLevel(str(level).upper())


def ensure_policy(policy: Union[Dict[str, Any], ExplorationPolicy]) -> ExplorationPolicy:
    return ExplorationPolicy.model_validate(policy) if isinstance(policy, dict) else policy
