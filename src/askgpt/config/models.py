"""Configuration models.

``AskGPTConfig`` is what the user stores (endpoint, model, key).
``ChatSettings`` holds the request constants that are fixed for a run.
"""

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ConfigError

DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-mini"

CONFIG_FIELDS = ("url", "model", "key")


class AskGPTConfig(BaseModel):
    """Endpoint, model and credential for chat requests."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(default="", description="Full chat-completions URL")
    model: str = Field(default="", description="Model name")
    key: str = Field(default="", description="API key sent as bearer token")

    def validate_runtime(self) -> None:
        """Check that every field needed for a request is set.

        Raises:
            ConfigError: Naming the first missing field, or a key that cannot
                be sent in an HTTP header
        """
        for name in CONFIG_FIELDS:
            if not getattr(self, name).strip():
                raise ConfigError(f"missing askgpt.{name} in config.yaml")
        if not self.key.isascii():
            raise ConfigError("askgpt.key contains non-ASCII characters")

    def with_overrides(self, **values: str | None) -> "AskGPTConfig":
        """Return a copy with the non-empty values replaced."""
        update = {k: v.strip() for k, v in values.items() if v and v.strip()}
        return self.model_copy(update=update)


class ChatSettings(BaseModel):
    """Request constants for a chat session."""

    model_config = ConfigDict(frozen=True)

    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1024, gt=0)
    timeout: float = Field(default=300.0, gt=0, description="Seconds for a whole exchange")
