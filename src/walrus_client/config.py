"""Client configuration helpers."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os

import yaml

from .client import WalrusClient
from .constants import (
    CONFIG_DIR,
    CONFIG_FILE,
    DEFAULT_AGGREGATOR_URL,
    DEFAULT_EPOCHS,
    DEFAULT_PUBLISHER_URL,
    ENV_AGGREGATOR_URL,
    ENV_EPOCHS,
    ENV_PUBLISHER_URL,
)
from .errors import ConfigError


@dataclass(frozen=True)
class ClientConfig:
    """Endpoints and store defaults used by the file helpers and the CLI."""

    aggregator_url: str = DEFAULT_AGGREGATOR_URL
    publisher_url: str = DEFAULT_PUBLISHER_URL
    default_epochs: int = DEFAULT_EPOCHS
    timeout: Optional[float] = None

    def make_client(self) -> WalrusClient:
        """Build a WalrusClient for these endpoints."""
        return WalrusClient(self.aggregator_url, self.publisher_url, timeout=self.timeout)


def default_config_path() -> Path:
    return Path.home() / CONFIG_DIR / CONFIG_FILE


def load_config(path: Optional[Path] = None) -> ClientConfig:
    """Load configuration from YAML, then apply environment overrides.

    Resolution order: environment variable > config file > built-in default.
    A missing file is not an error.

    Args:
        path: Config file (default: ~/.walrus-client/config.yaml)

    Raises:
        ConfigError: If the file exists but cannot be read or is malformed
    """
    cfg_path = Path(path) if path else default_config_path()

    data = {}
    if cfg_path.exists():
        try:
            data = yaml.safe_load(cfg_path.read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(str(cfg_path), str(e)) from e
        if not isinstance(data, dict):
            raise ConfigError(str(cfg_path), "expected a mapping at top level")

    aggregator = os.environ.get(ENV_AGGREGATOR_URL) or data.get("aggregator_url", DEFAULT_AGGREGATOR_URL)
    publisher = os.environ.get(ENV_PUBLISHER_URL) or data.get("publisher_url", DEFAULT_PUBLISHER_URL)

    env_epochs = os.environ.get(ENV_EPOCHS)
    if env_epochs:
        epochs_raw, source, key = env_epochs, f"environment variable {ENV_EPOCHS}", ENV_EPOCHS
    else:
        epochs_raw, source, key = data.get("default_epochs", DEFAULT_EPOCHS), str(cfg_path), "default_epochs"
    try:
        epochs = int(epochs_raw)
    except (TypeError, ValueError):
        raise ConfigError(source, f"{key} must be an integer, got {epochs_raw!r}")

    timeout = data.get("timeout")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ConfigError(str(cfg_path), f"timeout must be a number, got {timeout!r}")

    return ClientConfig(
        aggregator_url=aggregator,
        publisher_url=publisher,
        default_epochs=epochs,
        timeout=timeout,
    )
