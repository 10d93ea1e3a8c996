"""YAML config file handling.

The file lives at ``~/.askgpt/config.yaml`` and holds one ``askgpt`` section
in either of two shapes::

    askgpt:            askgpt:
      url: ...           - url: ...
      model: ...         - model: ...
      key: ...           - key: ...

Both are read; the list shape on the right is the one written.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigError
from .models import CONFIG_FIELDS, DEFAULT_API_URL, DEFAULT_MODEL, AskGPTConfig

logger = logging.getLogger(__name__)

APP_DIR_NAME = ".askgpt"
CONFIG_FILE_NAME = "config.yaml"
CONFIG_FILE_MODE = 0o600
CONFIG_DIR_MODE = 0o700
SECTION = "askgpt"

_HEADER = (
    "# askgpt config\n"
    "# You can edit this file directly, or use: askgpt set-url | set-model | set-key\n"
)


def default_config_path() -> Path:
    """Return ``~/.askgpt/config.yaml``."""
    try:
        home = Path.home()
    except RuntimeError as e:
        raise ConfigError(f"cannot resolve home dir: {e}") from e
    return home / APP_DIR_NAME / CONFIG_FILE_NAME


def parse_section(section: Any) -> AskGPTConfig:
    """Build a config from the ``askgpt`` section of a loaded document.

    Accepts a mapping or a list of single-pair mappings. Values are
    whitespace-trimmed; unknown keys and non-scalar entries are ignored.

    Raises:
        ConfigError: If the section is neither a mapping nor a list
    """
    if section is None:
        return AskGPTConfig()

    if isinstance(section, dict):
        pairs = [section]
    elif isinstance(section, list):
        pairs = [item for item in section if isinstance(item, dict)]
    else:
        raise ConfigError(
            f"askgpt config must be mapping or sequence, got {type(section).__name__}"
        )

    values: dict[str, str] = {}
    for pair in pairs:
        for key, value in pair.items():
            name = str(key).strip()
            if name not in CONFIG_FIELDS or isinstance(value, (dict, list)):
                continue
            values[name] = "" if value is None else str(value).strip()
    return AskGPTConfig(**values)


def dump_config(config: AskGPTConfig) -> str:
    """Serialize a config as the ``askgpt`` list-of-pairs document."""
    document = {SECTION: [{name: getattr(config, name)} for name in CONFIG_FIELDS]}
    return yaml.safe_dump(document, allow_unicode=True, sort_keys=False)


class ConfigStore:
    """Read and write the askgpt config file.

    Example:
        store = ConfigStore()
        created = store.ensure_exists()
        config = store.load()
    """

    def __init__(self, path: Path | None = None):
        self._path = path or default_config_path()

    @property
    def path(self) -> Path:
        """Location of the config file."""
        return self._path

    def ensure_exists(self) -> bool:
        """Create the config directory and a template file if missing.

        Returns:
            True if a template was written, False if the file already existed

        Raises:
            ConfigError: If the directory or file cannot be created
        """
        try:
            self._path.parent.mkdir(mode=CONFIG_DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"cannot create dir {self._path.parent}: {e}") from e

        if self._path.exists():
            return False

        logger.debug("writing config template to %s", self._path)
        self.save(AskGPTConfig(url=DEFAULT_API_URL, model=DEFAULT_MODEL, key=""))
        return True

    def load(self) -> AskGPTConfig:
        """Load the config file.

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"cannot read config {self._path}: {e}") from e

        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"cannot parse yaml {self._path}: {e}") from e

        if document is None:
            return AskGPTConfig()
        if not isinstance(document, dict):
            raise ConfigError(f"cannot parse yaml {self._path}: top level must be a mapping")
        return parse_section(document.get(SECTION))

    def save(self, config: AskGPTConfig) -> None:
        """Write the config file with owner-only permissions.

        Raises:
            ConfigError: If the file cannot be written
        """
        content = _HEADER + dump_config(config)
        try:
            fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise ConfigError(f"cannot write config {self._path}: {e}") from e

    def set_value(self, name: str, value: str) -> AskGPTConfig:
        """Update one field and write the file back.

        An existing but malformed file is reported, never overwritten.

        Raises:
            ConfigError: On an unknown field, empty value, or I/O failure
        """
        if name not in CONFIG_FIELDS:
            raise ConfigError(f"unknown config field: {name}")
        value = value.strip()
        if not value:
            raise ConfigError("empty value not allowed")

        self.ensure_exists()
        config = self.load().model_copy(update={name: value})
        self.save(config)
        return config
