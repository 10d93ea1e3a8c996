"""Configuration for askgpt.

Hides where settings come from: the YAML file in the user's home directory,
with optional ``ASKGPT_*`` environment overrides.
"""

import os

from .models import CONFIG_FIELDS, DEFAULT_API_URL, DEFAULT_MODEL, AskGPTConfig, ChatSettings
from .store import ConfigStore, default_config_path, dump_config, parse_section

ENV_PREFIX = "ASKGPT_"


def apply_env_overrides(config: AskGPTConfig) -> AskGPTConfig:
    """Overlay ``ASKGPT_URL``, ``ASKGPT_MODEL`` and ``ASKGPT_KEY`` when set.

    Environment variables:
        ASKGPT_URL: Chat-completions URL
        ASKGPT_MODEL: Model name
        ASKGPT_KEY: API key
    """
    return config.with_overrides(
        **{name: os.getenv(f"{ENV_PREFIX}{name.upper()}") for name in CONFIG_FIELDS}
    )


__all__ = [
    "CONFIG_FIELDS",
    "DEFAULT_API_URL",
    "DEFAULT_MODEL",
    "AskGPTConfig",
    "ChatSettings",
    "ConfigStore",
    "apply_env_overrides",
    "default_config_path",
    "dump_config",
    "parse_section",
]
