"""Shared pytest fixtures for all tests."""

import json
import re

import httpx
import pytest

from aas_sdk import AasClient, ClientSettings
from cli.config import Config

SERVER = 'http://aas.test'
API_PREFIX = '/api/v1/'


def parse_multipart(request: httpx.Request) -> dict:
    """
    Split a multipart/form-data request body into {field_name: bytes}.
    """
    boundary = request.headers['content-type'].split('boundary=')[1].encode()
    fields = {}
    for section in request.content.split(b'--' + boundary):
        head, sep, payload = section.partition(b'\r\n\r\n')
        if not sep:
            continue
        match = re.search(rb'name="([^"]+)"', head)
        fields[match.group(1).decode()] = payload[:-2]
    return fields


class FakeAasService:
    """
    In-memory stand-in for the AAS service, driven through httpx.MockTransport.

    Records every call in self.calls as (method, path) with the API prefix removed,
    and upload protocol steps in self.events in the order they happen.
    """

    def __init__(self):
        self.calls = []
        self.events = []
        self.grants = 0
        self.reject_grant = False
        self.invalid_token_responses = 0
        self.fail_part_seq = None
        self.files = {}
        self.parts = []

    @property
    def api_calls(self):
        return [c for c in self.calls if c[0] != 'GRANT' and c[0] != 'UPLOAD']

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == 'upload.test':
            return self._handle_upload(request)

        path = request.url.path
        if path == '/oauth/token':
            return self._handle_grant(request)

        assert path.startswith(API_PREFIX)
        path = path[len(API_PREFIX):]
        self.calls.append((request.method, path))

        if self.invalid_token_responses > 0:
            self.invalid_token_responses -= 1
            return httpx.Response(401, json={'error': 'invalid_token', 'error_description': 'The access token expired'})

        assert request.headers['authorization'] == f"Bearer tok{self.grants}"
        return self._handle_api(request, path)

    def _handle_grant(self, request):
        self.calls.append(('GRANT', '/oauth/token'))
        form = dict(pair.split('=', 1) for pair in request.content.decode().split('&'))
        assert form['grant_type'] == 'client_credentials'
        if self.reject_grant:
            return httpx.Response(401, json={'error': 'invalid_client', 'error_description': 'Client authentication failed'})
        self.grants += 1
        return httpx.Response(200, json={
            'access_token': f"tok{self.grants}",
            'token_type': 'bearer',
            'expires_in': 7200,
            'created_at': 1700000000,
        })

    def _handle_api(self, request, path):
        method = request.method
        match = re.fullmatch(r'collections/(\w+)/files/upload_cfg', path)
        if method == 'GET' and match:
            remote_path = request.url.params['path']
            self.events.append(('upload_cfg', remote_path))
            return httpx.Response(200, json={
                'url': 'http://upload.test/files',
                'data': {'collection_id': match.group(1), 'path': remote_path},
                'callback_url': None,
            })

        match = re.fullmatch(r'collections/(\w+)/files', path)
        if method == 'POST' and match:
            file_id = f"f{len(self.files) + 1}"
            body = json.loads(request.content)
            self.files[file_id] = {
                'id': file_id,
                'collection_id': match.group(1),
                'path': body['path'],
                'chunked_status': 'ready',
                'bytes': 0,
            }
            self.events.append(('create_file', file_id))
            return httpx.Response(201, json=self.files[file_id])

        match = re.fullmatch(r'collections/(\w+)/files/(\w+)/parts/upload_cfg', path)
        if method == 'GET' and match:
            seq_id = int(request.url.params['seq_id'])
            self.events.append(('part_cfg', seq_id))
            return httpx.Response(200, json={
                'url': 'http://upload.test/parts',
                'data': {'collection_id': match.group(1), 'file_id': match.group(2), 'seq_id': seq_id},
            })

        match = re.fullmatch(r'collections/(\w+)/files/(\w+)', path)
        if method == 'PUT' and match:
            body = json.loads(request.content)
            record = self.files[match.group(2)]
            record['chunked_status'] = body['chunked_status']
            record['bytes'] = sum(size for fid, _, size in self.parts if fid == record['id'])
            self.events.append(('complete', record['id']))
            return httpx.Response(200, json=record)

        return httpx.Response(404, json={'error': 'not_found', 'error_description': f"No route for {path}"})

    def _handle_upload(self, request):
        self.calls.append(('UPLOAD', request.url.path))
        fields = parse_multipart(request)
        content = fields['file']

        if request.url.path == '/files':
            self.events.append(('upload', len(content)))
            return httpx.Response(201, json={
                'id': 'f100',
                'collection_id': fields['collection_id'].decode(),
                'path': fields['path'].decode(),
                'chunked_status': 'none',
                'bytes': len(content),
            })

        seq_id = int(fields['seq_id'])
        file_id = fields['file_id'].decode()
        if seq_id == self.fail_part_seq:
            self.events.append(('part_failed', seq_id))
            return httpx.Response(500, json={'error': {'code': 'upload_failed', 'message': 'storage unavailable'}})
        self.parts.append((file_id, seq_id, len(content)))
        self.events.append(('part', seq_id, len(content)))
        return httpx.Response(201, json={
            'id': f"p{seq_id}",
            'collection_id': fields['collection_id'].decode(),
            'file_id': file_id,
            'seq_id': seq_id,
            'bytes': len(content),
        })


@pytest.fixture
def service():
    return FakeAasService()


@pytest.fixture
def settings():
    """Settings with the smallest allowed chunk threshold (1 KiB)."""
    return ClientSettings(client_id='client123', secret='s3cret', server=SERVER, max_chunk_bytes=1024)


@pytest.fixture
def client(settings, service):
    """AasClient wired to the fake service."""
    with AasClient(settings, session=httpx.Client(transport=service.transport())) as aas_client:
        yield aas_client


@pytest.fixture
def make_file(tmp_path):
    """
    Factory creating a local file of the given size.

    Returns:
        Callable (size, name='data.bin') -> Path
    """
    def _make(size: int, name: str = 'data.bin'):
        path = tmp_path / name
        path.write_bytes(bytes(i % 251 for i in range(size)))
        return path
    return _make


@pytest.fixture
def temp_config_dir(tmp_path):
    config_dir = tmp_path / '.aas'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir, monkeypatch):
    """
    Create temporary config instance with a clean AAS_* environment.
    """
    for name in ('AAS_CLIENT_ID', 'AAS_SECRET', 'AAS_SERVER', 'AAS_MAX_CHUNK_BYTES', 'AAS_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)
    return Config(temp_config_dir / 'config.json')
