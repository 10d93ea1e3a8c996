"""Exceptions raised by askgpt.

Every fatal condition of a chat session maps to one of these classes so the
CLI can report it by name instead of crashing with a traceback.
"""


class AskGPTError(Exception):
    """Base exception for all askgpt errors."""


class ConfigError(AskGPTError):
    """Raised when the config file cannot be read, parsed, or is incomplete."""


class InputReadError(AskGPTError):
    """Raised when the interactive input source fails."""


class NoInputError(AskGPTError):
    """Raised when the first message of a session is blank."""

    def __init__(self, message: str | None = None):
        super().__init__(message or "No input received.")


class ProviderError(AskGPTError):
    """Base class for errors talking to the chat-completion endpoint."""


class APIConnectionError(ProviderError):
    """Raised when the request cannot be sent or no response arrives."""


class APIStatusError(ProviderError):
    """Raised when the endpoint answers with a non-200 status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"api error ({status_code}): {body}")
        self.status_code = status_code
        self.body = body


class StreamReadError(ProviderError):
    """Raised when reading the streamed body fails midway.

    ``partial_text`` holds the reply text received before the failure.
    """

    def __init__(self, message: str, partial_text: str = ""):
        super().__init__(message)
        self.partial_text = partial_text


class RequestTimeoutError(StreamReadError):
    """Raised when a whole request/response exchange exceeds its deadline."""

    def __init__(self, timeout: float, partial_text: str = ""):
        super().__init__(f"request timed out after {timeout:g}s", partial_text)
        self.timeout = timeout
