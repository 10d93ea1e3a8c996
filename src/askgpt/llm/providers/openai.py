import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from ...config import DEFAULT_API_URL, DEFAULT_MODEL, ChatSettings
from ...errors import APIConnectionError, APIStatusError, ConfigError, StreamReadError
from ..base import LLMProvider
from ..models import ChatCompletionRequest, ChatMessage, StreamingResponse
from ..sse import iter_deltas

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI-compatible chat-completion endpoints.

    Hidden design decisions:
    - httpx client setup and bearer-token authentication
    - Request body construction from the transcript
    - Event-stream framing and chunk decoding
    - Mapping transport failures onto askgpt errors

    The endpoint is taken as a full URL (including ``/chat/completions``), so
    any server speaking the same protocol can be used.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        url: str = DEFAULT_API_URL,
        settings: ChatSettings | None = None,
        **client_kwargs: Any
    ):
        """Initialize the provider.

        Args:
            api_key: Bearer token for the endpoint
            model: Model name
            url: Full chat-completions URL
            settings: Sampling, token cap and timeout (defaults if omitted)
            **client_kwargs: Additional kwargs for httpx.AsyncClient
                (tests pass ``transport=httpx.MockTransport(...)``)

        Raises:
            ConfigError: If the key cannot be encoded into the header
        """
        self._model = model
        self._url = url
        self._settings = settings or ChatSettings()
        try:
            self._client = httpx.AsyncClient(
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {api_key}",
                },
                timeout=httpx.Timeout(self._settings.timeout),
                **client_kwargs
            )
        except UnicodeEncodeError as e:
            raise ConfigError(f"api key cannot be sent as a header: {e.reason}") from e

    @property
    def model(self) -> str:
        """Get the model name."""
        return self._model

    @property
    def settings(self) -> ChatSettings:
        """Get the request settings."""
        return self._settings

    def build_request(self, messages: list[ChatMessage]) -> ChatCompletionRequest:
        """Build the request body for a conversation."""
        return ChatCompletionRequest(
            model=self._model,
            messages=list(messages),
            temperature=self._settings.temperature,
            max_tokens=self._settings.max_tokens,
            stream=True,
        )

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        **kwargs: Any
    ) -> StreamingResponse:
        """Send the conversation and return the streamed reply.

        The request is sent and its status checked before this returns; the
        body is read as the caller iterates. Close the returned stream (or
        exhaust it) to release the connection.

        Args:
            messages: Conversation history
            **kwargs: Extra fields merged into the JSON body

        Returns:
            StreamingResponse yielding text deltas

        Raises:
            APIConnectionError: If the request cannot be sent
            APIStatusError: If the endpoint answers with a non-200 status
        """
        body = self.build_request(messages).model_dump(mode="json")
        body.update(kwargs)
        logger.debug(
            "POST %s model=%s messages=%d", self._url, body["model"], len(body["messages"])
        )

        request = self._client.build_request("POST", self._url, json=body)
        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise APIConnectionError(f"request failed: {e}") from e

        logger.debug("response status %d", response.status_code)
        if response.status_code != httpx.codes.OK:
            try:
                detail = (await response.aread()).decode("utf-8", errors="replace")
            except httpx.HTTPError as e:
                detail = f"<unreadable body: {e}>"
            finally:
                await response.aclose()
            raise APIStatusError(response.status_code, detail)

        return StreamingResponse(self._stream_generator(response), on_close=response.aclose)

    async def _stream_generator(self, response: httpx.Response) -> AsyncIterator[str]:
        """Internal generator decoding the event stream of an accepted response."""
        try:
            async for delta in iter_deltas(response.aiter_bytes()):
                yield delta
        except httpx.HTTPError as e:
            raise StreamReadError(f"stream read error: {e}") from e
        finally:
            await response.aclose()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
