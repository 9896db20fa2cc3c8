"""Client settings for the AAS API."""

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from common.constants import (
    API_BASE_PATH,
    DEFAULT_MAX_CHUNK_BYTES,
    DEFAULT_SERVER,
    DEFAULT_TIMEOUT,
    MIN_CHUNK_BYTES,
    TOKEN_PATH,
)
from aas_sdk.exceptions import AuthError, ConfigError


def _number(name: str, value: Any, kind: Callable[[Any], Any]) -> Any:
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid {name}: {value!r} is not a number", name)


def clamp_chunk_bytes(value: Optional[int]) -> int:
    """
    Resolve the chunked-upload threshold.

    None selects the 1 GiB default; anything below 1 KiB (including 0) is raised to 1 KiB.

    Raises:
        ConfigError: If the value is not an integer
    """
    if value is None:
        return DEFAULT_MAX_CHUNK_BYTES
    return max(_number('max_chunk_bytes', value, int), MIN_CHUNK_BYTES)


def read_env(environ: Optional[Mapping[str, str]] = None) -> dict:
    """
    Read settings from AAS_* environment variables, filling in defaults.

    Args:
        environ: Mapping to read instead of os.environ

    Returns:
        Dict with client_id, secret, server, max_chunk_bytes and timeout

    Raises:
        ConfigError: If AAS_MAX_CHUNK_BYTES or AAS_TIMEOUT is not a number
    """
    env = os.environ if environ is None else environ
    max_chunk_bytes = env.get('AAS_MAX_CHUNK_BYTES')
    timeout = env.get('AAS_TIMEOUT')
    return {
        'client_id': env.get('AAS_CLIENT_ID', ''),
        'secret': env.get('AAS_SECRET', ''),
        'server': env.get('AAS_SERVER') or DEFAULT_SERVER,
        'max_chunk_bytes': (
            _number('AAS_MAX_CHUNK_BYTES', max_chunk_bytes, int) if max_chunk_bytes else DEFAULT_MAX_CHUNK_BYTES
        ),
        'timeout': _number('AAS_TIMEOUT', timeout, float) if timeout else DEFAULT_TIMEOUT,
    }


@dataclass(frozen=True)
class ClientSettings:
    """
    Credentials and connection settings for one AasClient.
    """
    client_id: str
    secret: str = field(repr=False)
    server: str = DEFAULT_SERVER
    max_chunk_bytes: int = DEFAULT_MAX_CHUNK_BYTES
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        if not self.client_id or not self.secret:
            raise AuthError("Missing API credentials: client id and secret are required")
        object.__setattr__(self, 'max_chunk_bytes', clamp_chunk_bytes(self.max_chunk_bytes))
        object.__setattr__(self, 'timeout', _number('timeout', self.timeout, float))

    @property
    def server_url(self) -> str:
        return self.server.rstrip('/') + '/'

    @property
    def api_url(self) -> str:
        return self.server_url + API_BASE_PATH

    @property
    def token_url(self) -> str:
        return self.server_url + TOKEN_PATH

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> 'ClientSettings':
        """
        Build settings from AAS_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ
            **overrides: Explicit values that win over the environment (None values are ignored)

        Returns:
            ClientSettings instance
        """
        values = read_env(environ)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
