"""
Semantic Index abstraction.

Supplies precomputed item embeddings and the similarity between two vectors.
Embeddings are never computed here. Implementations: in-memory (tests, local
runs); production backs this with whatever vector store holds the embeddings.
"""

from typing import Dict, List, Optional, Protocol, Sequence

from slate_engine.models.item import CandidateItem
from slate_engine.utils.similarity import cosine_similarity


class SemanticIndex(Protocol):
    """Protocol for embedding lookup and vector similarity."""

    def embedding_of(self, item: CandidateItem) -> Optional[Sequence[float]]:
        """Return the item's precomputed embedding, or None when it has none."""
        ...

    def similarity(self, a: Sequence[float], b: Sequence[float]) -> float:
        """Similarity in [-1, 1]."""
        ...


class InMemorySemanticIndex:
    """
    Semantic index over a dict of embeddings.

    Items are looked up by embedding_ref, falling back to id. Similarity is cosine.
    """

    def __init__(self, embeddings: Optional[Dict[str, List[float]]] = None):
        self._embeddings: Dict[str, List[float]] = dict(embeddings or {})

    def add(self, key: str, vector: List[float]) -> None:
        self._embeddings[key] = list(vector)

    def embedding_of(self, item: CandidateItem) -> Optional[Sequence[float]]:
        if item.embedding_ref and item.embedding_ref in self._embeddings:
            return self._embeddings[item.embedding_ref]
        return self._embeddings.get(item.id)

    def similarity(self, a: Sequence[float], b: Sequence[float]) -> float:
        return cosine_similarity(a, b)

    def __len__(self) -> int:
        return len(self._embeddings)
