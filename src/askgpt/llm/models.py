from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..errors import StreamReadError


class StreamingResponse:
    """Wrapper for a streamed reply that accumulates the text it yields.

    Acts as an async iterator of text deltas. Every delta handed to the
    caller is also appended to :attr:`text`, so whatever arrived before a
    failure is still available afterwards. A StreamReadError raised by the
    source leaves with its ``partial_text`` set to that text.

    Usage:
        stream = await provider.chat_completion_stream(messages)
        async for delta in stream:
            print(delta, end="")
        print(stream.text)  # the full reply
    """

    def __init__(
        self,
        async_iter: AsyncIterator[str],
        on_close: Callable[[], Awaitable[None]] | None = None,
    ):
        """Initialize with an async iterator of text deltas.

        Args:
            async_iter: Async iterator yielding text deltas
            on_close: Optional coroutine function releasing the source
        """
        self._iter = async_iter
        self._on_close = on_close
        self._parts: list[str] = []

    @property
    def text(self) -> str:
        """Text received so far."""
        return "".join(self._parts)

    async def aclose(self) -> None:
        """Close the underlying iterator (releases the HTTP response)."""
        aclose = getattr(self._iter, "aclose", None)
        try:
            if aclose is not None:
                await aclose()
        finally:
            if self._on_close is not None:
                await self._on_close()

    def __aiter__(self) -> "StreamingResponse":
        """Return self as async iterator."""
        return self

    async def __anext__(self) -> str:
        """Get the next delta and record it."""
        try:
            delta = await self._iter.__anext__()
        except StreamReadError as e:
            e.partial_text = self.text
            raise
        self._parts.append(delta)
        return delta


class ChatMessage(BaseModel):
    """Represents a chat message in a conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"] = Field(description="Role of the message sender")
    content: str = Field(description="Content of the message")


class ChatCompletionRequest(BaseModel):
    """JSON body of a streaming chat-completion request."""

    model: str
    messages: list[ChatMessage]
    temperature: float
    max_tokens: int
    stream: bool = True


class ChunkDelta(BaseModel):
    content: str | None = None


class ChunkChoice(BaseModel):
    delta: ChunkDelta = Field(default_factory=ChunkDelta)


class ChatCompletionChunk(BaseModel):
    """One streamed completion chunk. Unknown fields are ignored."""

    choices: list[ChunkChoice] = Field(default_factory=list)

    @property
    def delta_text(self) -> str:
        """Text delta of the first choice, or "" when there is none."""
        if not self.choices:
            return ""
        return self.choices[0].delta.content or ""
