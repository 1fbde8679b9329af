"""
Engine configuration — scoring mode, debiasing, diversity, slate, cold-start,
timeout, and concurrency parameters.

EngineConfig defaults are defined here. A caller may pass a dict (e.g. from a
JSON config file named by SLATE_ENGINE_CONFIG); from_dict() merges it with these
defaults. Bad values fail at load time, never per request.
"""

import json
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .weights import ScoringMode


class EngineConfig(BaseModel):
    """Configuration for the slate engine."""

    model_config = ConfigDict(frozen=True)

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    # Factor convention: raw point values or [0, 1] normalized factors.
    # Supplied weight sets must use the same mode.
    scoring_mode: ScoringMode = ScoringMode.RAW_POINTS

    # Max points for timeFit in raw_points mode (20 or 25 in practice).
    time_fit_max_points: float = Field(default=20.0, gt=0)

    # Travel tolerance used by distanceComfort when the profile has none.
    default_travel_tolerance_minutes: float = Field(default=30.0, gt=0)

    # -------------------------------------------------------------------------
    # Popularity Debiasing
    # score *= ((popularity + 1) / (mean_popularity + 1)) ** -debias_alpha
    # -------------------------------------------------------------------------

    debias_alpha: float = Field(default=0.3, ge=0)

    # -------------------------------------------------------------------------
    # Diversity (MMR)
    # mmr = lambda * relevance - (1 - lambda) * max_similarity_to_selected
    # -------------------------------------------------------------------------

    mmr_lambda: float = Field(default=0.7, ge=0, le=1)
    # Items kept by MMR before the Best slate takes its top slate_size by score.
    best_pool_size: int = Field(default=10, ge=1)

    # -------------------------------------------------------------------------
    # Slates
    # -------------------------------------------------------------------------

    # Max items per slate.
    slate_size: int = Field(default=5, ge=1)
    # Wildcard keeps items with novelty > threshold AND score > floor.
    wildcard_novelty_threshold: float = Field(default=0.4, ge=0, le=1)
    wildcard_score_floor: float = Field(default=0.35, ge=0, le=1)
    # Max reasons attached to one slate item (1-3).
    max_reasons: int = Field(default=3, ge=1, le=3)

    # -------------------------------------------------------------------------
    # Cold Start Augmentation
    # -------------------------------------------------------------------------

    # Augment only when the matched pool has fewer items than this.
    cold_start_pool_threshold: int = Field(default=20, ge=0)
    # Max augmented items per category, and in total.
    cold_start_per_category_cap: int = Field(default=5, ge=1)
    cold_start_max_items: int = Field(default=30, ge=0)
    # Augmented items only fill the pool up to this size.
    max_pool_size: int = Field(default=50, ge=1)

    # -------------------------------------------------------------------------
    # Timeouts (seconds) for the two slow collaborator calls
    # -------------------------------------------------------------------------

    policy_lookup_timeout_seconds: float = Field(default=0.15, gt=0)
    augmentation_timeout_seconds: float = Field(default=0.2, gt=0)

    # -------------------------------------------------------------------------
    # Concurrency
    # -------------------------------------------------------------------------

    # Scoring worker pool size. None = os.cpu_count().
    max_workers: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def pool_sizes_consistent(self):
        if self.slate_size > self.best_pool_size:
            raise ValueError(
                f"slate_size ({self.slate_size}) cannot exceed best_pool_size ({self.best_pool_size})"
            )
        return self

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "EngineConfig":
        """Create config from dictionary (e.g., loaded from JSON)."""
        flat = {k: v for k, v in config_dict.items() if not isinstance(v, dict)}
        if "scoring" in config_dict:
            sc = config_dict["scoring"]
            if "mode" in sc:
                flat["scoring_mode"] = sc["mode"]
            if "time_fit_max_points" in sc:
                flat["time_fit_max_points"] = sc["time_fit_max_points"]
            if "travel_tolerance_minutes" in sc:
                flat["default_travel_tolerance_minutes"] = sc["travel_tolerance_minutes"]
        if "debias" in config_dict:
            db = config_dict["debias"]
            if "alpha" in db:
                flat["debias_alpha"] = db["alpha"]
        if "diversity" in config_dict:
            dv = config_dict["diversity"]
            if "lambda" in dv:
                flat["mmr_lambda"] = dv["lambda"]
            if "pool_size" in dv:
                flat["best_pool_size"] = dv["pool_size"]
        if "slates" in config_dict:
            sl = config_dict["slates"]
            for key in ("slate_size", "wildcard_novelty_threshold", "wildcard_score_floor", "max_reasons"):
                if key in sl:
                    flat[key] = sl[key]
            if "size" in sl:
                flat["slate_size"] = sl["size"]
        if "cold_start" in config_dict:
            cs = config_dict["cold_start"]
            if "pool_threshold" in cs:
                flat["cold_start_pool_threshold"] = cs["pool_threshold"]
            if "per_category_cap" in cs:
                flat["cold_start_per_category_cap"] = cs["per_category_cap"]
            if "max_items" in cs:
                flat["cold_start_max_items"] = cs["max_items"]
            if "max_pool_size" in cs:
                flat["max_pool_size"] = cs["max_pool_size"]
        if "timeouts" in config_dict:
            to = config_dict["timeouts"]
            if "policy_lookup_seconds" in to:
                flat["policy_lookup_timeout_seconds"] = to["policy_lookup_seconds"]
            if "augmentation_seconds" in to:
                flat["augmentation_timeout_seconds"] = to["augmentation_seconds"]
        if "concurrency" in config_dict:
            cc = config_dict["concurrency"]
            if "max_workers" in cc:
                flat["max_workers"] = cc["max_workers"]
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "EngineConfig":
        with open(path) as f:
            return cls.from_dict(json.load(f))


DEFAULT_CONFIG = EngineConfig()


def resolve_config(config: Optional["EngineConfig"]) -> "EngineConfig":
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG
