import json
from pathlib import Path
from typing import Any

from docsync.config.settings import DEFAULT_CONFIG_PATH
from docsync.sync.domain.errors import ConfigError, ConfigFileNotFoundError


def load_docs_config(path: str | Path = DEFAULT_CONFIG_PATH) -> dict[str, dict[str, Any]]:
    """Read the source-key -> raw source config mapping. Entries are validated later, per source."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigFileNotFoundError(
            f"{config_path} not found. Please ensure the documentation sync config file exists."
        )
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain an object mapping source keys to sources")
    return data
