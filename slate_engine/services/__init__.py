"""Collaborator abstractions the engine depends on, with in-memory implementations."""

from .bandit_policy_store import ArmStats, BanditPolicyStore, BanditSelection, BanditStrategy
from .policy_store import InMemoryPolicyStore, PolicyStore
from .retrieval import CandidateRetriever, ChainedRetriever, InMemoryRetriever
from .semantic_index import InMemorySemanticIndex, SemanticIndex
from .trace_sink import (
    InMemoryTraceSink,
    LoggingTraceSink,
    NullTraceSink,
    TraceRecord,
    TraceSink,
)

__all__ = [
    "ArmStats",
    "BanditPolicyStore",
    "BanditSelection",
    "BanditStrategy",
    "CandidateRetriever",
    "ChainedRetriever",
    "InMemoryPolicyStore",
    "InMemoryRetriever",
    "InMemorySemanticIndex",
    "InMemoryTraceSink",
    "LoggingTraceSink",
    "NullTraceSink",
    "PolicyStore",
    "SemanticIndex",
    "TraceRecord",
    "TraceSink",
]
