"""Client library for the AAS file-archival service."""

from aas_sdk.client import AasClient
from aas_sdk.config import ClientSettings
from aas_sdk.exceptions import AasError, AuthError, ConfigError, LocalIOError, RemoteError, TokenExpiredError
from aas_sdk.schemas import Collection, FilePart, Order, RemoteFile, ShipTo, UploadConfig

__all__ = [
    'AasClient',
    'ClientSettings',
    'AasError',
    'AuthError',
    'ConfigError',
    'ConfigError',
    'LocalIOError',
    'RemoteError',
    'TokenExpiredError',
    'Collection',
    'FilePart',
    'Order',
    'RemoteFile',
    'ShipTo',
    'UploadConfig',
]
