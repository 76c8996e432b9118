"""Contracts for the external capabilities the RAG workflows depend on.

Each external service is reached through one of these narrow protocols so the
workflows can run against any implementation, including in-memory fakes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, runtime_checkable

from langchain_core.documents import Document


@dataclass
class VectorRecord:
    """A chunk ready to be stored: its embedding, text and metadata."""

    vector: List[float]
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Turns text into fixed-dimension vectors."""

    async def embed(self, texts: List[str]) -> List[List[float]]:
        """Embed a batch of passages for indexing."""
        ...

    async def embed_query(self, text: str) -> List[float]:
        """Embed a single search query."""
        ...


@runtime_checkable
class VectorStore(Protocol):
    """Namespaced, append-only vector index with nearest-neighbor search."""

    async def upsert(self, records: List[VectorRecord]) -> List[str]:
        """Store records and return the ids they were written under."""
        ...

    async def search(self, vector: List[float], limit: int) -> List[Document]:
        """Return up to ``limit`` passages ranked by similarity."""
        ...


@runtime_checkable
class ChatModel(Protocol):
    """Hosted chat model answering a system + user prompt."""

    async def complete(self, system_prompt: str, user_message: str) -> str:
        ...
