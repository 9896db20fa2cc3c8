"""Configuration management for AAS CLI."""

import json
import shutil
from pathlib import Path
from typing import Optional

from common.constants import DEFAULT_SERVER, DEFAULT_TIMEOUT
from common.logging_config import get_logger
from aas_sdk.config import ClientSettings, read_env

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.aas' / 'config.json'


class Config:
    """Manages CLI configuration stored in a JSON file, with environment and flag overrides."""

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.aas/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    @staticmethod
    def defaults() -> dict:
        """
        Defaults, read from AAS_* environment variables at call time.

        Raises:
            ConfigError: If a numeric variable does not parse
        """
        return read_env()

    def _load(self) -> dict:
        """
        Load configuration from file over the defaults.

        Returns:
            Configuration dictionary
        """
        config = self.defaults()
        if not self.config_path.exists():
            return config

        try:
            with open(self.config_path, 'r') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("config root must be an object")
        except (ValueError, OSError) as e:
            backup_path = self.config_path.with_suffix('.json.bak')
            logger.warning(f"Unreadable config file {self.config_path}: {e}; backing up to {backup_path}")
            try:
                shutil.copy(self.config_path, backup_path)
            except OSError as copy_error:
                logger.warning(f"Could not back up config file: {copy_error}")
            return config

        config.update(data)
        return config

    def apply_overrides(self, **overrides) -> None:
        """
        Apply command-line flag values; None means the flag was not given.
        """
        for key, value in overrides.items():
            if value is not None:
                self.data[key] = value

    def get_server(self) -> str:
        return self.data.get('server') or DEFAULT_SERVER

    def get_credentials(self) -> tuple[str, str]:
        """
        Get client id and secret.

        Returns:
            Tuple of (client_id, secret); either may be empty
        """
        return self.data.get('client_id', ''), self.data.get('secret', '')

    def get_max_chunk_bytes(self) -> Optional[int]:
        return self.data.get('max_chunk_bytes')

    def get_timeout(self) -> float:
        return self.data.get('timeout', DEFAULT_TIMEOUT)

    def to_settings(self) -> ClientSettings:
        """
        Build client settings.

        Raises:
            AuthError: If the client id or secret is missing
        """
        client_id, secret = self.get_credentials()
        return ClientSettings(
            client_id=client_id,
            secret=secret,
            server=self.get_server(),
            max_chunk_bytes=self.get_max_chunk_bytes(),
            timeout=self.get_timeout(),
        )
