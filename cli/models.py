"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ListCollectionsCommand:
    """List collections."""

    command: Literal["collections"] = "collections"


@dataclass(frozen=True)
class CreateCollectionCommand:
    """Create a collection of the given disc type."""

    collection_type: str = "dvd_4_7G"
    command: Literal["create-collection"] = "create-collection"


@dataclass(frozen=True)
class ShowCollectionCommand:
    collection_id: str
    command: Literal["show-collection"] = "show-collection"


@dataclass(frozen=True)
class CompleteCollectionCommand:
    collection_id: str
    command: Literal["complete-collection"] = "complete-collection"


@dataclass(frozen=True)
class DeleteCollectionCommand:
    collection_id: str
    command: Literal["delete-collection"] = "delete-collection"


@dataclass(frozen=True)
class ListFilesCommand:
    collection_id: str
    command: Literal["files"] = "files"


@dataclass(frozen=True)
class ShowFileCommand:
    collection_id: str
    file_id: str
    command: Literal["show-file"] = "show-file"


@dataclass(frozen=True)
class DeleteFileCommand:
    collection_id: str
    file_id: str
    command: Literal["delete-file"] = "delete-file"


@dataclass(frozen=True)
class ListPartsCommand:
    collection_id: str
    file_id: str
    command: Literal["parts"] = "parts"


@dataclass(frozen=True)
class UploadCommand:
    """Upload local files and directories into a collection."""

    collection_id: str
    local_paths: tuple[str, ...]
    prefix: str = ""
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class ListOrdersCommand:
    command: Literal["orders"] = "orders"


@dataclass(frozen=True)
class ShowOrderCommand:
    order_id: str
    command: Literal["show-order"] = "show-order"


@dataclass(frozen=True)
class CreateOrderCommand:
    """Create a burn-and-ship order; ship_to holds (key, value) pairs."""

    collection_id: str
    title: str
    ship_to: tuple[tuple[str, str], ...]
    no_disc: bool = False
    command: Literal["create-order"] = "create-order"


CommandRequest = (
    ListCollectionsCommand
    | CreateCollectionCommand
    | ShowCollectionCommand
    | CompleteCollectionCommand
    | DeleteCollectionCommand
    | ListFilesCommand
    | ShowFileCommand
    | DeleteFileCommand
    | ListPartsCommand
    | UploadCommand
    | ListOrdersCommand
    | ShowOrderCommand
    | CreateOrderCommand
)
