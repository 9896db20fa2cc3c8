"""Single-shot and chunked file uploads."""

import os
from typing import BinaryIO, Callable, Optional

from common.constants import DEFAULT_TIMEOUT, UPLOAD_TIMEOUT_PER_MIB
from common.logging_config import get_logger
from aas_sdk.api_client import ApiClient
from aas_sdk.config import clamp_chunk_bytes
from aas_sdk.exceptions import LocalIOError
from aas_sdk.schemas import FilePart, RemoteFile, UploadConfig, parse_model

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int], None]

CHUNK_FILENAME = 'chunk'


def calculate_upload_timeout(size: int) -> float:
    """
    Calculate the timeout for one transfer based on its size.

    Args:
        size: Payload size in bytes

    Returns:
        Timeout in seconds (30s base + 0.1s per MiB)
    """
    size_mib = size / (1024 * 1024)
    return DEFAULT_TIMEOUT + size_mib * UPLOAD_TIMEOUT_PER_MIB


class ChunkedUploader:
    """
    Uploads local files into a collection.

    Files smaller than max_chunk_bytes go up in one transfer. Larger files are
    created as a placeholder, sent as sequential parts of exactly max_chunk_bytes
    (the last one may be shorter), then marked complete.
    """

    def __init__(self, api: ApiClient, max_chunk_bytes: Optional[int] = None):
        self.api = api
        self.max_chunk_bytes = clamp_chunk_bytes(max_chunk_bytes)

    def upload_file(
        self,
        collection_id: str,
        remote_path: str,
        local_path: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> RemoteFile:
        """
        Upload a local file to a collection.

        Args:
            collection_id: ID of the target collection
            remote_path: Path used when burning the file to disc
            local_path: Path of the local file to upload
            on_progress: Called with (sent_bytes, total_bytes) after each transfer

        Returns:
            The uploaded file

        Raises:
            LocalIOError: If the local file cannot be read
            RemoteError: If any service call fails
        """
        size = _file_size(local_path)
        with _open_local(local_path) as fh:
            if size < self.max_chunk_bytes:
                return self._upload_whole(collection_id, remote_path, local_path, fh, size, on_progress)
            return self._upload_chunked(collection_id, remote_path, local_path, fh, size, on_progress)

    def upload_chunk(self, collection_id: str, file_id: str, seq_id: int, data: bytes) -> FilePart:
        """
        Upload bytes as part seq_id of a chunked file.

        Args:
            collection_id: ID of the collection containing the file
            file_id: ID of the placeholder file
            seq_id: 0-based sequence id of the part
            data: Bytes of the part

        Returns:
            The uploaded file part
        """
        cfg = parse_model(
            UploadConfig,
            self.api.get(
                f"collections/{collection_id}/files/{file_id}/parts/upload_cfg",
                params={'seq_id': seq_id},
            ),
        )
        body = self.api.upload_form(
            cfg.url,
            cfg.data,
            CHUNK_FILENAME,
            data,
            timeout=calculate_upload_timeout(len(data)),
        )
        part = parse_model(FilePart, body)
        logger.debug(f"Uploaded part seq_id={seq_id} bytes={len(data)} [file_id={file_id}]")
        return part

    def _upload_whole(
        self,
        collection_id: str,
        remote_path: str,
        local_path: str,
        fh: BinaryIO,
        size: int,
        on_progress: Optional[ProgressCallback],
    ) -> RemoteFile:
        logger.info(f"Uploading {local_path} as {remote_path} in one transfer ({size} bytes)")
        cfg = parse_model(
            UploadConfig,
            self.api.get(f"collections/{collection_id}/files/upload_cfg", params={'path': remote_path}),
        )
        body = self.api.upload_form(
            cfg.url,
            cfg.data,
            os.path.basename(local_path),
            fh,
            timeout=calculate_upload_timeout(size),
        )
        remote_file = parse_model(RemoteFile, body)
        if on_progress:
            on_progress(size, size)
        return remote_file

    def _upload_chunked(
        self,
        collection_id: str,
        remote_path: str,
        local_path: str,
        fh: BinaryIO,
        size: int,
        on_progress: Optional[ProgressCallback],
    ) -> RemoteFile:
        remote_file = parse_model(
            RemoteFile,
            self.api.post(f"collections/{collection_id}/files", {'path': remote_path}),
        )
        logger.info(
            f"Uploading {local_path} as {remote_path} in chunks of {self.max_chunk_bytes} bytes "
            f"[file_id={remote_file.id}]"
        )

        sent = 0
        seq_id = 0
        while True:
            block = _read_block(fh, self.max_chunk_bytes, local_path)
            if not block:
                break
            try:
                self.upload_chunk(collection_id, remote_file.id, seq_id, block)
            except Exception:
                logger.error(
                    f"Chunk upload failed at seq_id={seq_id}; file left incomplete "
                    f"[collection_id={collection_id} file_id={remote_file.id}]"
                )
                raise
            sent += len(block)
            seq_id += 1
            if on_progress:
                on_progress(sent, size)

        completed = self.api.put(
            f"collections/{collection_id}/files/{remote_file.id}",
            {'chunked_status': 'complete'},
        )
        remote_file = parse_model(RemoteFile, completed)
        logger.info(f"Chunked upload complete: {seq_id} part(s) [file_id={remote_file.id}]")
        return remote_file


def _file_size(local_path: str) -> int:
    try:
        return os.path.getsize(local_path)
    except OSError as e:
        raise LocalIOError(f"Cannot read {local_path}: {e.strerror or e}", local_path) from e


def _open_local(local_path: str) -> BinaryIO:
    try:
        return open(local_path, 'rb')
    except OSError as e:
        raise LocalIOError(f"Cannot open {local_path}: {e.strerror or e}", local_path) from e


def _read_block(fh: BinaryIO, size: int, local_path: str) -> bytes:
    try:
        return fh.read(size)
    except OSError as e:
        raise LocalIOError(f"Cannot read {local_path}: {e.strerror or e}", local_path) from e
