from basechat.retriever.base import RetrievalResult, Retriever, ScoredChunk, SourceRecord
from basechat.retriever.ragie import RagieRetriever

__all__ = ["RagieRetriever", "RetrievalResult", "Retriever", "ScoredChunk", "SourceRecord"]
