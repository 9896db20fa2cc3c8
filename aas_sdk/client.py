"""AasClient: collections, files, parts, orders and uploads for one credential."""

from typing import List, Optional

import httpx

from common.logging_config import get_logger
from aas_sdk.api_client import ApiClient
from aas_sdk.config import ClientSettings
from aas_sdk.schemas import (
    Collection,
    CollectionType,
    FilePart,
    Order,
    RemoteFile,
    ShipTo,
    parse_list,
    parse_model,
)
from aas_sdk.token_manager import TokenManager
from aas_sdk.upload import ChunkedUploader, ProgressCallback

logger = get_logger(__name__)


class AasClient:
    """
    Client for the AAS API bound to one set of credentials.

    Example:
        with AasClient(ClientSettings.from_env()) as client:
            collection = client.create_collection()
            client.upload_file(collection.id, '/video/clip.mp4', 'clip.mp4')
            client.complete_collection(collection.id)
    """

    def __init__(self, settings: ClientSettings, session: Optional[httpx.Client] = None):
        """
        Initialize the client.

        Args:
            settings: Credentials and connection settings
            session: Optional HTTP session (for dependency injection in tests)
        """
        self.settings = settings
        self.session = session or httpx.Client(timeout=settings.timeout)
        self.tokens = TokenManager(settings, self.session)
        self.api = ApiClient(settings, self.session, self.tokens)
        self.uploader = ChunkedUploader(self.api, settings.max_chunk_bytes)
        logger.info(f"Initialized AasClient [server={settings.server_url}]")

    # Collections

    def list_collections(self) -> List[Collection]:
        return parse_list(Collection, self.api.get('collections'), 'collections')

    def create_collection(self, type: CollectionType = 'dvd_4_7G') -> Collection:
        return parse_model(Collection, self.api.post('collections', {'type': type}))

    def get_collection(self, collection_id: str) -> Collection:
        return parse_model(Collection, self.api.get(f"collections/{collection_id}"))

    def complete_collection(self, collection_id: str) -> Collection:
        """Mark a collection complete and ready for burning."""
        return parse_model(
            Collection,
            self.api.put(f"collections/{collection_id}", {'upload_status': 'complete'}),
        )

    def delete_collection(self, collection_id: str) -> None:
        self.api.delete(f"collections/{collection_id}")

    # Files

    def list_files(self, collection_id: str) -> List[RemoteFile]:
        return parse_list(RemoteFile, self.api.get(f"collections/{collection_id}/files"), 'files')

    def get_file(self, collection_id: str, file_id: str) -> RemoteFile:
        return parse_model(RemoteFile, self.api.get(f"collections/{collection_id}/files/{file_id}"))

    def create_file(self, collection_id: str, path: str) -> RemoteFile:
        """Create a placeholder file for a chunked upload."""
        return parse_model(RemoteFile, self.api.post(f"collections/{collection_id}/files", {'path': path}))

    def complete_file(self, collection_id: str, file_id: str) -> RemoteFile:
        """Set a chunked file's status to complete once all parts are uploaded."""
        return parse_model(
            RemoteFile,
            self.api.put(f"collections/{collection_id}/files/{file_id}", {'chunked_status': 'complete'}),
        )

    def delete_file(self, collection_id: str, file_id: str) -> None:
        self.api.delete(f"collections/{collection_id}/files/{file_id}")

    def upload_file(
        self,
        collection_id: str,
        remote_path: str,
        local_path: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> RemoteFile:
        """
        Upload a local file to a collection, in chunks if it reaches max_chunk_bytes.

        Args:
            collection_id: ID of the target collection
            remote_path: Path used when burning the file to disc
            local_path: Path of the local file
            on_progress: Optional (sent_bytes, total_bytes) callback

        Returns:
            The uploaded file
        """
        return self.uploader.upload_file(collection_id, remote_path, local_path, on_progress)

    # File parts

    def list_parts(self, collection_id: str, file_id: str) -> List[FilePart]:
        return parse_list(
            FilePart,
            self.api.get(f"collections/{collection_id}/files/{file_id}/parts"),
            'parts',
        )

    def get_part(self, collection_id: str, file_id: str, part_id: str) -> FilePart:
        return parse_model(
            FilePart,
            self.api.get(f"collections/{collection_id}/files/{file_id}/parts/{part_id}"),
        )

    def upload_chunk(self, collection_id: str, file_id: str, seq_id: int, data: bytes) -> FilePart:
        return self.uploader.upload_chunk(collection_id, file_id, seq_id, data)

    # Orders

    def list_orders(self) -> List[Order]:
        return parse_list(Order, self.api.get('orders'), 'orders')

    def create_order(self, collection_id: str, title: str, ship_to: ShipTo, no_disc: bool = False) -> Order:
        """
        Create an order to burn a collection to disc and ship it.

        Args:
            collection_id: ID of the collection to burn
            title: Title of the disc
            ship_to: Shipping address
            no_disc: Only create the order record, without burning or shipping

        Returns:
            The created order
        """
        payload = {
            'collection_id': collection_id,
            'title': title,
            'ship_to': ship_to.model_dump(),
            'no_disc': no_disc,
        }
        return parse_model(Order, self.api.post('orders', payload))

    def get_order(self, order_id: str) -> Order:
        return parse_model(Order, self.api.get(f"orders/{order_id}"))

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self) -> 'AasClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
