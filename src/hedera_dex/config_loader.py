"""Configuration loader utility for loading YAML configs into Pydantic models."""

import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Mapping

import yaml
from dotenv import load_dotenv

from .config_models import (
    Config,
    DexSettings,
    ModelConfig,
    NetworkConfig,
    QueryConfig,
    SwapConfig,
)
from .models import PoolRecord

logger = logging.getLogger(__name__)

SettingLookup = Callable[[str], str | None]


class ConfigLoader:
    """Loads and manages configuration from YAML files."""

    def __init__(self, config_dir: str | Path | None = None):
        """Initialize the config loader.

        Args:
            config_dir: Path to the configuration directory.
                       Defaults to the 'configs' directory shipped with the package.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent / "configs"

        self.config_dir = Path(config_dir)
        if not self.config_dir.exists():
            raise ValueError(f"Configuration directory not found: {self.config_dir}")

        self._config: Config | None = None

    def load(self) -> Config:
        """Load all configuration files and return the combined config.

        Returns:
            Config: The loaded configuration object.
        """
        if self._config is not None:
            return self._config

        # Load networks
        networks = self._load_yaml("networks.yaml")
        network_configs = {}
        if networks:
            for name, network_data in networks.items():
                network_configs[name] = NetworkConfig(name=name, **network_data)

        # Load the demo dataset
        demo_data = self._load_yaml("demo_pools.yaml")
        demo_pools: List[PoolRecord] = []
        if demo_data:
            for pool_data in demo_data.get("pools", []):
                demo_pools.append(PoolRecord(**pool_data))

        query_data = self._load_yaml("query.yaml")
        query_config = QueryConfig(**query_data) if query_data else QueryConfig()

        swap_data = self._load_yaml("swap.yaml")
        swap_config = SwapConfig(**swap_data) if swap_data else SwapConfig()

        model_data = self._load_yaml("models.yaml")
        model_config = ModelConfig(**model_data) if model_data else ModelConfig()

        self._config = Config(
            networks=network_configs,
            demo_pools=demo_pools,
            query=query_config,
            swap=swap_config,
            models=model_config,
        )
        logger.debug(
            "Loaded configuration for networks %s from %s",
            ", ".join(network_configs),
            self.config_dir,
        )

        return self._config

    def _load_yaml(self, filename: str) -> Dict | None:
        """Load a YAML file from the config directory.

        Args:
            filename: Name of the YAML file to load.

        Returns:
            Dict or None: The loaded YAML data or None if file doesn't exist.
        """
        filepath = self.config_dir / filename
        if not filepath.exists():
            return None

        with open(filepath) as f:
            return yaml.safe_load(f)

    def reload(self) -> Config:
        """Reload configuration from disk.

        Returns:
            Config: The reloaded configuration object.
        """
        self._config = None
        return self.load()


def load_settings(
    settings: Mapping[str, str | None] | SettingLookup | None = None,
) -> DexSettings:
    """Build runtime settings from a settings lookup.

    Args:
        settings: A mapping or a ``get_setting``-style callable. Defaults to the
            process environment (after loading a ``.env`` file if present).

    Returns:
        DexSettings: The parsed settings.
    """
    if settings is None:
        load_dotenv()
        lookup: SettingLookup = os.getenv
    elif isinstance(settings, Mapping):
        lookup = settings.get
    else:
        lookup = settings

    return DexSettings(
        network=lookup("HEDERA_NETWORK"),
        mirror_node_url=lookup("HEDERA_MIRROR_NODE_URL"),
        demo_mode=lookup("DEMO_MODE") or False,
        private_key=lookup("HEDERA_PRIVATE_KEY"),
        account_id=lookup("HEDERA_ACCOUNT_ID"),
    )


# Global config loader instance
_config_loader = None


def get_config_loader() -> ConfigLoader:
    """Get the global config loader instance.

    Returns:
        ConfigLoader: The global config loader.
    """
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def get_config() -> Config:
    """Get the loaded configuration.

    Returns:
        Config: The loaded configuration object.
    """
    return get_config_loader().load()
