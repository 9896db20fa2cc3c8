"""Project-wide constants (server defaults, API paths, chunk limits)."""

DEFAULT_SERVER: str = "https://aas.yesvideo.com/"
API_BASE_PATH: str = "api/v1/"
TOKEN_PATH: str = "oauth/token"

DEFAULT_MAX_CHUNK_BYTES: int = 1024 ** 3  # 1 GiB
MIN_CHUNK_BYTES: int = 1024  # 1 KiB floor

DEFAULT_TIMEOUT: float = 30.0
UPLOAD_TIMEOUT_PER_MIB: float = 0.1

INVALID_TOKEN_CODE: str = "invalid_token"

COLLECTION_TYPES = ("dvd_4_7G", "blueray_25G")
