"""
Retriever backed by the Ragie hosted retrieval API.

Each tenant's documents live in their own Ragie partition, keyed by the tenant
id. Requests always ask for re-ranked results. HTTP and network errors are not
caught here: there is no retry at this layer and failures reach the caller.
"""

from typing import Any

import httpx
from loguru import logger

from basechat.retriever.base import RetrievalResult, Retriever, ScoredChunk, SourceRecord


class RagieRetriever(Retriever):
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.ragie.ai",
        top_k: int = 6,
        rerank: bool = True,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(top_k)
        self.rerank = rerank
        self.client = client or httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=httpx.Timeout(timeout, connect=10.0),
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def retrieve(self, partition: str, query: str) -> RetrievalResult:
        payload: dict[str, Any] = {
            "query": query,
            "top_k": self.top_k,
            "rerank": self.rerank,
            "partition": partition,
        }
        response = await self.client.post("/retrievals", json=payload)
        response.raise_for_status()
        data = response.json()

        scored_chunks = [ScoredChunk.model_validate(chunk) for chunk in data.get("scored_chunks", [])]
        logger.info(f"ragie response includes {len(scored_chunks)} chunk(s)")
        return RetrievalResult(
            scored_chunks=scored_chunks,
            sources=[SourceRecord.from_chunk(chunk) for chunk in scored_chunks],
            raw=data,
        )
