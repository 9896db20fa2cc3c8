"""OAuth2 client-credentials token lifecycle."""

import threading
from typing import Optional

import httpx
from pydantic import ValidationError

from common.logging_config import get_logger
from aas_sdk.config import ClientSettings
from aas_sdk.exceptions import AuthError, RemoteError
from aas_sdk.schemas import AccessToken

logger = get_logger(__name__)


class TokenManager:
    """
    Acquires and caches one access token.

    The token is fetched lazily and replaced only through force_refresh(); expiry is
    detected by the caller when the service rejects the token.
    """

    def __init__(self, settings: ClientSettings, session: httpx.Client):
        self.settings = settings
        self.session = session
        self._token: Optional[AccessToken] = None
        self._lock = threading.Lock()

    def access_token(self) -> AccessToken:
        """Return the cached token, performing a grant exchange if there is none."""
        with self._lock:
            if self._token is None:
                self._token = self._request_token()
            return self._token

    def force_refresh(self) -> AccessToken:
        """Perform a new grant exchange and replace the cached token."""
        with self._lock:
            logger.info("Refreshing access token")
            self._token = self._request_token()
            return self._token

    def _request_token(self) -> AccessToken:
        """
        Exchange client id and secret for a bearer token.

        Raises:
            AuthError: If the grant is rejected
            RemoteError: If the token endpoint cannot be reached
        """
        logger.debug(f"Requesting client-credentials token from {self.settings.token_url}")
        try:
            response = self.session.post(
                self.settings.token_url,
                data={
                    'grant_type': 'client_credentials',
                    'client_id': self.settings.client_id,
                    'client_secret': self.settings.secret,
                },
                headers={'Accept': 'application/json'},
            )
        except httpx.TimeoutException as e:
            raise RemoteError("Token request timed out. Server may be overloaded.", code='timeout') from e
        except httpx.TransportError as e:
            raise RemoteError(
                f"Cannot connect to AAS server at {self.settings.server_url}",
                code='connection_error',
            ) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error or not isinstance(body, dict) or body.get('error') or not body.get('access_token'):
            message = _grant_error_message(response, body)
            logger.warning(f"Token grant rejected: status={response.status_code} error={message}")
            raise AuthError(f"Authentication failed: {message}", payload=body)

        try:
            token = AccessToken.model_validate(body)
        except ValidationError as e:
            logger.warning(f"Malformed token response: {e.error_count()} validation error(s)")
            raise AuthError("Authentication failed: malformed token response", payload=body) from e
        logger.info("Access token acquired")
        return token


def _grant_error_message(response: httpx.Response, body) -> str:
    if isinstance(body, dict) and body.get('error'):
        return body.get('error_description') or str(body['error'])
    if response.is_error:
        return f"HTTP {response.status_code}"
    return "token response missing access_token"
