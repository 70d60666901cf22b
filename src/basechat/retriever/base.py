"""
Retriever abstractions and retrieval data models.

A retriever accepts a tenant partition and a natural-language query and returns
the ranked chunks of the retrieval service together with the source records the
UI needs for citations. 'RetrievalResult.raw' keeps the service response as it
arrived so the system prompt can carry it verbatim.

Concrete implementations: 'RagieRetriever'.
"""

import json
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ScoredChunk(BaseModel):
    """A ranked chunk as returned by the retrieval service. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    text: str = ""
    score: float | None = None
    document_id: str
    document_name: str
    document_metadata: dict[str, Any] = Field(default_factory=dict)


class SourceRecord(BaseModel):
    """
    Citation metadata for a retrieved chunk.

    Attributes:
        document_id: Identifier of the document in the retrieval service.
        document_name: Human-readable document name.
        extras: The document's provider-supplied metadata, copied as-is.
    """

    document_id: str
    document_name: str
    extras: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_chunk(cls, chunk: ScoredChunk) -> "SourceRecord":
        return cls(document_id=chunk.document_id, document_name=chunk.document_name, extras=dict(chunk.document_metadata))


class RetrievalResult(BaseModel):
    scored_chunks: list[ScoredChunk]
    sources: list[SourceRecord]
    raw: dict[str, Any]

    def serialize(self) -> str:
        """The full service response as JSON, not just the chunk texts."""
        return json.dumps(self.raw)


class Retriever(ABC):
    """
    Abstract base class for tenant-partitioned retrievers.

    Attributes:
        top_k: Maximum number of chunks to return per query.
    """

    def __init__(self, top_k: int):
        self.top_k = top_k

    @abstractmethod
    async def retrieve(self, partition: str, query: str) -> RetrievalResult:
        """Return up to 'top_k' chunks most relevant to 'query' within 'partition'."""
        pass

    async def close(self) -> None:
        """Release any connections held by the retriever."""
        pass
