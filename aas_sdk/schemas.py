"""Pydantic schemas for AAS API resources."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError

from aas_sdk.exceptions import RemoteError


ChunkedStatus = Literal['none', 'ready', 'complete', 'merged']
CollectionType = Literal['dvd_4_7G', 'blueray_25G']
UploadStatus = Literal['ready', 'complete', 'expired']
OrderStatus = Literal['received', 'burning', 'shipped', 'test_complete']


class AccessToken(BaseModel):
    """Bearer token issued by the client-credentials grant."""
    access_token: str
    token_type: str = 'bearer'
    expires_in: Optional[int] = None
    created_at: Optional[int] = None

    @property
    def authorization(self) -> str:
        return f"Bearer {self.access_token}"


class UploadConfig(BaseModel):
    """One-time descriptor authorizing a single upload transfer."""
    url: str
    data: Dict[str, Any] = Field(default_factory=dict)
    callback_url: Optional[str] = None


class Collection(BaseModel):
    """A collection of files to be burned to one disc."""
    id: str
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    type: CollectionType
    upload_status: UploadStatus
    bytes: int = 0
    bytes_left: Optional[int] = None


class RemoteFile(BaseModel):
    """A file in a collection."""
    id: str
    collection_id: str
    path: str
    chunked_status: ChunkedStatus = 'none'
    bytes: int = Field(default=0, ge=0)


class FilePart(BaseModel):
    """One uploaded chunk of a file."""
    id: str
    collection_id: str
    file_id: str
    seq_id: int = Field(ge=0)
    bytes: int = Field(ge=0)


class ShipTo(BaseModel):
    """Shipping address for an order."""
    recipient: str
    address1: str
    address2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    phone_number: str

    def __str__(self) -> str:
        return (
            f"{self.recipient} / {self.address1} / {self.address2 or ''} / "
            f"{self.city}, {self.state} {self.postal_code} / {self.phone_number}"
        )


class Order(BaseModel):
    """A burn-and-ship order for a collection."""
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    collection_id: str
    title: str
    status: OrderStatus
    ship_to: ShipTo
    total: Optional[str] = None


ModelT = TypeVar('ModelT', bound=BaseModel)


def parse_model(model: Type[ModelT], payload: Any) -> ModelT:
    """
    Validate a response payload into a schema.

    Raises:
        RemoteError: If required fields are missing or values are out of range
    """
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise RemoteError(
            f"Invalid {model.__name__} in response: {e.error_count()} validation error(s)",
            code='invalid_response',
            payload=payload,
        ) from e


def parse_list(model: Type[ModelT], payload: Any, key: str) -> List[ModelT]:
    """Validate a wrapped list response such as {"files": [...]}."""
    if not isinstance(payload, dict) or not isinstance(payload.get(key), list):
        raise RemoteError(
            f"Invalid response: expected a '{key}' list",
            code='invalid_response',
            payload=payload,
        )
    return [parse_model(model, item) for item in payload[key]]
