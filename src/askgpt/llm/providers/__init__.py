from .openai import DEFAULT_API_URL, DEFAULT_MODEL, OpenAIProvider

__all__ = ["DEFAULT_API_URL", "DEFAULT_MODEL", "OpenAIProvider"]
