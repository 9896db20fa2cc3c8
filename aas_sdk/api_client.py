"""Authenticated HTTP request executor for the AAS API."""

import uuid
from typing import Any, Optional

import httpx

from common.constants import INVALID_TOKEN_CODE
from common.logging_config import get_logger
from aas_sdk.config import ClientSettings
from aas_sdk.exceptions import RemoteError, TokenExpiredError
from aas_sdk.token_manager import TokenManager

logger = get_logger(__name__)


class ApiClient:
    """
    Issues GET/PUT/POST/DELETE calls against the versioned API root.

    Each call attaches the current bearer token. When the service answers with
    invalid_token, the token is refreshed and the call is sent exactly once more.
    """

    def __init__(self, settings: ClientSettings, session: httpx.Client, tokens: TokenManager):
        """
        Initialize the request executor.

        Args:
            settings: Client settings (server URL, timeout)
            session: HTTP session shared with the token manager
            tokens: Token manager owning the access token
        """
        self.settings = settings
        self.session = session
        self.tokens = tokens
        self.request_id: Optional[str] = None

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self._request('GET', path, params=params)

    def put(self, path: str, body: dict) -> Any:
        return self._request('PUT', path, json=body)

    def post(self, path: str, body: dict) -> Any:
        return self._request('POST', path, json=body)

    def delete(self, path: str) -> Any:
        return self._request('DELETE', path)

    def upload_form(
        self,
        url: str,
        data: dict,
        filename: str,
        content,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        POST a multipart form to an upload target.

        The target URL comes from an UploadConfig and is authorized by its form
        fields, so no bearer token is attached and no refresh is attempted.

        Args:
            url: Upload target URL
            data: Auxiliary form fields from the UploadConfig
            filename: Filename reported for the 'file' field
            content: Bytes or a binary file object
            timeout: Transfer timeout in seconds

        Returns:
            Parsed JSON response body
        """
        fields = {key: str(value) for key, value in data.items()}
        response = self._send(
            'POST',
            url,
            data=fields,
            files={'file': (filename, content, 'application/octet-stream')},
            timeout=timeout if timeout is not None else self.settings.timeout,
        )
        return self._check(response, self._parse(response))

    def _request(self, method: str, path: str, **kwargs) -> Any:
        token = self.tokens.access_token()
        try:
            return self._authorized(method, path, token.authorization, **kwargs)
        except TokenExpiredError as first:
            logger.info(f"Access token rejected on {method} {path}, refreshing and retrying once")
            token = self.tokens.force_refresh()
            try:
                return self._authorized(method, path, token.authorization, **kwargs)
            except TokenExpiredError as second:
                raise RemoteError(
                    f"Access token rejected after refresh: {second}",
                    code=INVALID_TOKEN_CODE,
                    status_code=second.status_code,
                    payload=second.payload,
                ) from first

    def _authorized(self, method: str, path: str, authorization: str, **kwargs) -> Any:
        url = self.settings.api_url + path.lstrip('/')
        response = self._send(method, url, headers={'Authorization': authorization}, **kwargs)
        body = self._parse(response)

        if _is_invalid_token(response, body):
            raise TokenExpiredError(
                _error_message(body) or "invalid_token",
                payload=body,
                status_code=response.status_code,
            )
        return self._check(response, body)

    def _send(self, method: str, url: str, headers: Optional[dict] = None, **kwargs) -> httpx.Response:
        self.request_id = str(uuid.uuid4())
        headers = dict(headers or {})
        headers['X-Request-ID'] = self.request_id
        headers.setdefault('Accept', 'application/json')

        logger.debug(f"Making request: {method} {url} [request_id={self.request_id}]")
        try:
            response = self.session.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {method} {url} [request_id={self.request_id}]")
            raise RemoteError("Request timed out. Server may be overloaded.", code='timeout') from e
        except httpx.TransportError as e:
            logger.error(f"Network error: {method} {url} error={e} [request_id={self.request_id}]")
            raise RemoteError(
                f"Cannot connect to {httpx.URL(url).host}. Is the server reachable?",
                code='connection_error',
            ) from e

        logger.debug(
            f"Response received: {method} {url} status={response.status_code} [request_id={self.request_id}]"
        )
        return response

    @staticmethod
    def _parse(response: httpx.Response) -> Any:
        """Parse a response body as JSON; {} for an empty body, None if it is not JSON."""
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return None

    def _check(self, response: httpx.Response, body: Any) -> Any:
        """
        Turn error statuses and embedded 'error' fields into RemoteError.

        Returns:
            The parsed body of a successful response
        """
        if response.is_error or (isinstance(body, dict) and body.get('error')):
            raise self._remote_error(response, body)
        if body is None:
            raise RemoteError(
                "Invalid response: body is not JSON",
                code='invalid_response',
                status_code=response.status_code,
                payload=response.text,
            )
        return body

    def _remote_error(self, response: httpx.Response, body: Any) -> RemoteError:
        code = _error_code(body) or f"http_{response.status_code}"
        message = _error_message(body) or f"HTTP {response.status_code} {response.reason_phrase}".strip()
        logger.warning(
            f"Remote error: status={response.status_code} code={code} [request_id={self.request_id}]"
        )
        return RemoteError(message, code=code, status_code=response.status_code, payload=body)


def _error_code(body: Any) -> Optional[str]:
    if not isinstance(body, dict) or not body.get('error'):
        return None
    error = body['error']
    if isinstance(error, dict):
        return error.get('code')
    return str(error)


def _error_message(body: Any) -> Optional[str]:
    if not isinstance(body, dict) or not body.get('error'):
        return None
    error = body['error']
    if isinstance(error, dict):
        return error.get('message') or error.get('code')
    return body.get('error_description') or body.get('message') or str(error)


def _is_invalid_token(response: httpx.Response, body: Any) -> bool:
    if _error_code(body) == INVALID_TOKEN_CODE:
        return True
    if response.status_code == 401:
        return INVALID_TOKEN_CODE in response.headers.get('WWW-Authenticate', '')
    return False
