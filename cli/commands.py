"""Command handler functions for CLI operations."""

from typing import Callable, Optional

from pydantic import ValidationError

from common.logging_config import get_logger
from aas_sdk import AasClient
from aas_sdk.schemas import Collection, Order, RemoteFile, ShipTo
from cli.config import Config
from cli.models import (
    CommandRequest,
    CompleteCollectionCommand,
    CreateCollectionCommand,
    CreateOrderCommand,
    DeleteCollectionCommand,
    DeleteFileCommand,
    ListCollectionsCommand,
    ListFilesCommand,
    ListOrdersCommand,
    ListPartsCommand,
    ShowCollectionCommand,
    ShowFileCommand,
    ShowOrderCommand,
    UploadCommand,
)
from cli.parser import ParseError
from cli.utils import UploadProgress, collect_upload_targets, format_file_size, format_table

logger = get_logger(__name__)


_client: Optional[AasClient] = None
_config: Optional[Config] = None


def configure(config: Config) -> None:
    """
    Set the configuration used to build the global client.

    Args:
        config: Configuration with any command-line overrides applied
    """
    global _config, _client
    _config = config
    if _client is not None:
        _client.close()
        _client = None


def get_client() -> AasClient:
    """
    Get or create global AasClient instance.

    Returns:
        AasClient instance

    Raises:
        AuthError: If credentials are not configured
    """
    global _client
    if _client is None:
        logger.debug("Creating new AasClient instance")
        config = _config or Config()
        _client = AasClient(config.to_settings())
    return _client


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


def _date(value) -> str:
    return value.strftime('%Y-%m-%d %H:%M') if value else '-'


def _collection_details(collection: Collection) -> str:
    left = format_file_size(collection.bytes_left) if collection.bytes_left is not None else '-'
    return (
        f"Collection {collection.id}\n"
        f"  Type:    {collection.type}\n"
        f"  Status:  {collection.upload_status}\n"
        f"  Used:    {format_file_size(collection.bytes)}\n"
        f"  Left:    {left}\n"
        f"  Created: {_date(collection.created_at)}\n"
        f"  Expires: {_date(collection.expires_at)}"
    )


def _file_details(remote_file: RemoteFile) -> str:
    return (
        f"File {remote_file.id}\n"
        f"  Collection: {remote_file.collection_id}\n"
        f"  Path:       {remote_file.path}\n"
        f"  Status:     {remote_file.chunked_status}\n"
        f"  Size:       {format_file_size(remote_file.bytes)}"
    )


def _order_details(order: Order) -> str:
    return (
        f"Order {order.id}\n"
        f"  Collection: {order.collection_id}\n"
        f"  Title:      {order.title}\n"
        f"  Status:     {order.status}\n"
        f"  Ship to:    {order.ship_to}\n"
        f"  Total:      {order.total or '-'}\n"
        f"  Created:    {_date(order.created_at)}\n"
        f"  Updated:    {_date(order.updated_at)}"
    )


def handle_list_collections(cmd: ListCollectionsCommand, client: Optional[AasClient] = None) -> str:
    """
    Handle 'collections' command.

    Args:
        cmd: ListCollectionsCommand
        client: Optional AasClient for dependency injection (testing)

    Returns:
        Table of collections
    """
    client = client or get_client()
    collections = client.list_collections()
    if not collections:
        return "No collections found."
    return format_table(
        ["ID", "TYPE", "STATUS", "USED", "LEFT", "EXPIRES"],
        [
            (
                c.id,
                c.type,
                c.upload_status,
                format_file_size(c.bytes),
                format_file_size(c.bytes_left) if c.bytes_left is not None else '-',
                _date(c.expires_at),
            )
            for c in collections
        ],
    )


def handle_create_collection(cmd: CreateCollectionCommand, client: Optional[AasClient] = None) -> str:
    client = client or get_client()
    collection = client.create_collection(cmd.collection_type)
    logger.info(f"Created collection {collection.id}")
    return f"Created collection {collection.id} ({collection.type})"


def handle_show_collection(cmd: ShowCollectionCommand, client: Optional[AasClient] = None) -> str:
    client = client or get_client()
    return _collection_details(client.get_collection(cmd.collection_id))


def handle_complete_collection(cmd: CompleteCollectionCommand, client: Optional[AasClient] = None) -> str:
    client = client or get_client()
    collection = client.complete_collection(cmd.collection_id)
    return f"Collection {collection.id} marked {collection.upload_status}."


def handle_delete_collection(cmd: DeleteCollectionCommand, client: Optional[AasClient] = None) -> str:
    client = client or get_client()
    client.delete_collection(cmd.collection_id)
    return f"Deleted collection {cmd.collection_id}."


def handle_list_files(cmd: ListFilesCommand, client: Optional[AasClient] = None) -> str:
    """
    Handle 'files' command.

    Args:
        cmd: ListFilesCommand with collection_id
        client: Optional AasClient for dependency injection (testing)

    Returns:
        Table of files with a total size line
    """
    client = client or get_client()
    files = client.list_files(cmd.collection_id)
    if not files:
        return f"No files in collection {cmd.collection_id}."
    table = format_table(
        ["ID", "PATH", "STATUS", "SIZE"],
        [(f.id, f.path, f.chunked_status, format_file_size(f.bytes)) for f in files],
    )
    total = sum(f.bytes for f in files)
    return f"{table}\n\n{len(files)} file(s), {format_file_size(total)} total"


def handle_show_file(cmd: ShowFileCommand, client: Optional[AasClient] = None) -> str:
    client = client or get_client()
    return _file_details(client.get_file(cmd.collection_id, cmd.file_id))


def handle_delete_file(cmd: DeleteFileCommand, client: Optional[AasClient] = None) -> str:
    client = client or get_client()
    client.delete_file(cmd.collection_id, cmd.file_id)
    return f"Deleted file {cmd.file_id}."


def handle_list_parts(cmd: ListPartsCommand, client: Optional[AasClient] = None) -> str:
    client = client or get_client()
    parts = sorted(client.list_parts(cmd.collection_id, cmd.file_id), key=lambda p: p.seq_id)
    if not parts:
        return f"File {cmd.file_id} has no parts."
    return format_table(
        ["SEQ", "ID", "SIZE"],
        [(p.seq_id, p.id, format_file_size(p.bytes)) for p in parts],
    )


def handle_upload(
    cmd: UploadCommand,
    client: Optional[AasClient] = None,
    progress_factory: Callable[[str], Callable[[int, int], None]] = UploadProgress,
) -> str:
    """
    Handle 'upload' command.

    Uploads stop at the first failure; files already uploaded stay in the collection.

    Args:
        cmd: UploadCommand with collection_id, local_paths and prefix
        client: Optional AasClient for dependency injection (testing)
        progress_factory: Builds a progress callback for a remote path

    Returns:
        One line per uploaded file
    """
    try:
        targets = collect_upload_targets(cmd.local_paths, cmd.prefix)
    except FileNotFoundError as e:
        raise ParseError(str(e))
    if not targets:
        return "No files to upload."

    logger.info(f"Executing upload command: {len(targets)} file(s) to collection {cmd.collection_id}")
    client = client or get_client()
    results = []
    for local_path, remote_path in targets:
        remote_file = client.upload_file(
            cmd.collection_id,
            remote_path,
            local_path,
            on_progress=progress_factory(remote_path),
        )
        results.append(
            f"Uploaded: {remote_file.path} (ID: {remote_file.id}, Size: {format_file_size(remote_file.bytes)})"
        )
    return "\n".join(results)


def handle_list_orders(cmd: ListOrdersCommand, client: Optional[AasClient] = None) -> str:
    client = client or get_client()
    orders = client.list_orders()
    if not orders:
        return "No orders found."
    return format_table(
        ["ID", "COLLECTION", "TITLE", "STATUS", "TOTAL", "CREATED"],
        [(o.id, o.collection_id, o.title, o.status, o.total or '-', _date(o.created_at)) for o in orders],
    )


def handle_show_order(cmd: ShowOrderCommand, client: Optional[AasClient] = None) -> str:
    client = client or get_client()
    return _order_details(client.get_order(cmd.order_id))


def handle_create_order(cmd: CreateOrderCommand, client: Optional[AasClient] = None) -> str:
    """
    Handle 'create-order' command.

    Raises:
        ParseError: If the shipping fields do not form a valid address
    """
    try:
        ship_to = ShipTo(**dict(cmd.ship_to))
    except ValidationError as e:
        missing = [str(err['loc'][0]) for err in e.errors() if err['type'] == 'missing']
        if missing:
            raise ParseError(f"Missing shipping field(s): {', '.join(missing)}")
        raise ParseError(f"Invalid shipping address: {e}")

    client = client or get_client()
    order = client.create_order(cmd.collection_id, cmd.title, ship_to, no_disc=cmd.no_disc)
    logger.info(f"Created order {order.id} for collection {order.collection_id}")
    return f"Created order {order.id} ({order.status})\n  Ship to: {order.ship_to}"


HANDLERS = {
    ListCollectionsCommand: handle_list_collections,
    CreateCollectionCommand: handle_create_collection,
    ShowCollectionCommand: handle_show_collection,
    CompleteCollectionCommand: handle_complete_collection,
    DeleteCollectionCommand: handle_delete_collection,
    ListFilesCommand: handle_list_files,
    ShowFileCommand: handle_show_file,
    DeleteFileCommand: handle_delete_file,
    ListPartsCommand: handle_list_parts,
    UploadCommand: handle_upload,
    ListOrdersCommand: handle_list_orders,
    ShowOrderCommand: handle_show_order,
    CreateOrderCommand: handle_create_order,
}


def dispatch_command(cmd_obj: CommandRequest, client: Optional[AasClient] = None) -> str:
    """Dispatch parsed command to appropriate handler."""
    handler = HANDLERS.get(type(cmd_obj))
    if handler is None:
        raise ParseError(f"Unknown command type: {type(cmd_obj).__name__}")
    return handler(cmd_obj, client=client)
