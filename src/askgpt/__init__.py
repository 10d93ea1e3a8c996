"""
askgpt: a terminal chat client for GPT-style chat-completion APIs.

Reads messages line by line (with continuation and paste modes), streams
replies as they arrive, and keeps the whole conversation in each request.
"""

__version__ = "0.1.0"

from .chat import ChatSession, Transcript
from .config import AskGPTConfig, ChatSettings, ConfigStore
from .errors import (
    APIConnectionError,
    APIStatusError,
    AskGPTError,
    ConfigError,
    InputReadError,
    NoInputError,
    ProviderError,
    RequestTimeoutError,
    StreamReadError,
)
from .input import InputMode, LineReader, is_quit
from .llm import ChatMessage, LLMProvider, OpenAIProvider, create_llm_provider
from .prompts import TASKS, template

__all__ = [
    "ChatSession",
    "Transcript",
    "AskGPTConfig",
    "ChatSettings",
    "ConfigStore",
    "APIConnectionError",
    "APIStatusError",
    "AskGPTError",
    "ConfigError",
    "InputReadError",
    "NoInputError",
    "ProviderError",
    "RequestTimeoutError",
    "StreamReadError",
    "InputMode",
    "LineReader",
    "is_quit",
    "ChatMessage",
    "LLMProvider",
    "OpenAIProvider",
    "create_llm_provider",
    "TASKS",
    "template",
]
