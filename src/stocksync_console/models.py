from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)

Number = int | float
ModelT = TypeVar("ModelT", bound=BaseModel)


class MovementType(str, Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class Identity(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "_id", "sub"))
    name: str | None = None
    email: str | None = None
    role: str | None = None


class LoginResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    token: str = Field(min_length=1)
    user: Identity | None = None


class Reference(BaseModel):
    """Cross-reference to another resource: a bare identifier or a populated object."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    name: str | None = None
    sku: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_identifier(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"_id": value}
        return value


class Resource(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(min_length=1, validation_alias=AliasChoices("_id", "id"))


class Item(Resource):
    name: str = ""
    sku: str = ""
    quantity: Number = 0
    location: str | None = None
    category: str | None = None
    supplier: Reference | None = None
    low_stock_threshold: Number | None = Field(
        default=None, validation_alias=AliasChoices("lowStockThreshold", "low_stock_threshold")
    )


class ContactInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: str | None = None
    phone: str | None = None
    address: str | None = None


class Supplier(Resource):
    name: str = ""
    contact_info: ContactInfo = Field(
        default_factory=ContactInfo, validation_alias=AliasChoices("contactInfo", "contact_info")
    )
    reliability: Number | None = None
    performance: Number | None = None


class StockMovement(Resource):
    item: Reference
    type: MovementType
    quantity: Number = 0
    date: str | None = None
    user: Reference | None = None
    supplier: Reference | None = None
    note: str = ""


class Alert(Resource):
    date: str | None = None
    item: Reference | None = None
    message: str = ""
    status: str = ""

    @property
    def is_read(self) -> bool:
        return self.status.lower() == "read"


class ItemAnalytics(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    name: str = ""
    sku: str = ""
    quantity: Number = 0
    movements: Number = 0


class SupplierAnalytics(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    name: str = ""
    reliability: Number = 0
    total_supplied: Number = Field(default=0, validation_alias=AliasChoices("totalSupplied", "total_supplied"))


class TotalStock(BaseModel):
    model_config = ConfigDict(extra="allow")

    total_stock: Number = Field(default=0, validation_alias=AliasChoices("totalStock", "total_stock"))


@dataclass(frozen=True)
class DecodedRows(Generic[ModelT]):
    rows: list[ModelT] = field(default_factory=list)
    malformed: bool = False
    dropped: int = 0


def decode_rows(payload: Any, model: type[ModelT]) -> DecodedRows[ModelT]:
    """Decode a list body; anything that is not a list decodes to no rows."""
    if not isinstance(payload, list):
        if payload is not None:
            logger.warning("decode_not_a_list", extra={"model": model.__name__, "payload_type": type(payload).__name__})
        return DecodedRows(rows=[], malformed=True)
    rows: list[ModelT] = []
    dropped = 0
    for entry in payload:
        try:
            rows.append(model.model_validate(entry))
        except PydanticValidationError:
            dropped += 1
    if dropped:
        logger.warning("decode_rows_dropped", extra={"model": model.__name__, "dropped": dropped})
    return DecodedRows(rows=rows, malformed=False, dropped=dropped)


def decode_object(payload: Any, model: type[ModelT]) -> ModelT | None:
    if not isinstance(payload, dict):
        return None
    try:
        return model.model_validate(payload)
    except PydanticValidationError:
        logger.warning("decode_object_failed", extra={"model": model.__name__})
        return None

