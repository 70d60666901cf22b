from basechat.generation.handle import GenerationHandle, GenerationOutcome, GenerationStatus
from basechat.generation.orchestrator import GenerationOrchestrator
from basechat.generation.schemas import ConversationMessageResponse, GenerateContext

__all__ = [
    "ConversationMessageResponse",
    "GenerateContext",
    "GenerationHandle",
    "GenerationOrchestrator",
    "GenerationOutcome",
    "GenerationStatus",
]
