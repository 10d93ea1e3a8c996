from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, StreamingResponse


class LLMProvider(ABC):
    """Abstract base class for chat-completion providers.

    This module hides how a conversation reaches a model. Implementations
    own their HTTP client, request format and stream decoding.

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            stream = await provider.chat_completion_stream(messages)
        # Automatically cleaned up
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Model name sent with every request."""

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat completion.

        Args:
            messages: Full conversation so far, oldest first
            **kwargs: Provider-specific parameters

        Returns:
            StreamingResponse yielding text deltas; its ``text`` holds the
            accumulated reply

        Raises:
            ProviderError: On connection failure, non-200 status or a broken
                stream (raised while iterating)
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "LLMProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup."""
        await self.close()
