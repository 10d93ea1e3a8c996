from .base import LLMProvider
from .factory import create_llm_provider
from .models import ChatCompletionChunk, ChatCompletionRequest, ChatMessage, StreamingResponse
from .providers import OpenAIProvider
from .sse import StreamEnd, decode_event, iter_deltas, iter_lines

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "ChatMessage",
    "StreamingResponse",
    "OpenAIProvider",
    "StreamEnd",
    "decode_event",
    "iter_deltas",
    "iter_lines",
]
