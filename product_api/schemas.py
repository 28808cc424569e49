from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from product_api.errors import ValidationError

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

REQUIRED_MESSAGES = {
    "name": "Product name is required",
    "price": "Product price is required",
    "description": "Product description is required",
    "body": "Request body is required",
}

REQUIRED = "product_required"


def _text_rule(field: str, type_label: str, length_label: str, max_length: int):
    def check(value: Any) -> str:
        if value is None:
            raise PydanticCustomError(REQUIRED, REQUIRED_MESSAGES[field])
        if not isinstance(value, str):
            raise PydanticCustomError("product_type", f"{type_label} must be a string")

        value = value.strip()
        if not value:
            raise PydanticCustomError(REQUIRED, REQUIRED_MESSAGES[field])
        if len(value) > max_length:
            raise PydanticCustomError(
                "product_too_long",
                f"{length_label} cannot exceed {max_length} characters",
            )
        return value

    return check


def _check_price(value: Any) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError(REQUIRED, REQUIRED_MESSAGES["price"])
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise PydanticCustomError("product_type", "Product price must be a number")

    try:
        price = float(value)
    except (TypeError, ValueError, OverflowError):
        # OverflowError: integers too large for a float
        raise PydanticCustomError("product_type", "Product price must be a number") from None

    if not math.isfinite(price):
        raise PydanticCustomError("product_type", "Product price must be a number")
    if price < 0:
        raise PydanticCustomError("product_negative", "Price cannot be negative")
    return price


_check_name = _text_rule("name", "Product name", "Product name", NAME_MAX_LENGTH)
_check_description = _text_rule("description", "Product description", "Description", DESCRIPTION_MAX_LENGTH)


class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Annotated[str, BeforeValidator(_check_name)]
    price: Annotated[float, BeforeValidator(_check_price)]
    description: Annotated[str, BeforeValidator(_check_description)]


class ProductUpdate(BaseModel):
    """
    Partial product payload.

    Absent fields stay unset (see ``model_dump(exclude_unset=True)``);
    an explicit ``null`` still runs the field rule and is rejected.
    """

    model_config = ConfigDict(extra="ignore")

    name: Annotated[Optional[str], BeforeValidator(_check_name)] = None
    price: Annotated[Optional[float], BeforeValidator(_check_price)] = None
    description: Annotated[Optional[str], BeforeValidator(_check_description)] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    price: float
    description: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive values; everything is stored in UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class FieldError(BaseModel):
    field: str
    message: str


class ProductEnvelope(BaseModel):
    success: bool = True
    data: ProductRead


class ProductListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[ProductRead]


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    errors: Optional[List[FieldError]] = None


def _field_name(loc: Sequence[Any]) -> str:
    for part in reversed(loc):
        if isinstance(part, str) and part != "body":
            return part
    return "body"


def field_errors(errors: Iterable[Mapping[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten Pydantic error dicts into ``[{"field": ..., "message": ...}]``.

    Only the first violation of each field is reported.
    """
    out: List[Dict[str, str]] = []
    seen = set()
    for err in errors:
        field = _field_name(err.get("loc", ()))
        if field in seen:
            continue
        seen.add(field)

        if err.get("type") == "missing":
            message = REQUIRED_MESSAGES.get(field, f"{field} is required")
        else:
            message = str(err.get("msg", "Invalid value"))
        out.append({"field": field, "message": message})
    return out


def validate_product(
    data: Union[Mapping[str, Any], BaseModel],
    *,
    partial: bool = False,
) -> Union[ProductCreate, ProductUpdate]:
    """Validate a full (create) or partial (update) payload, raising ValidationError."""
    model = ProductUpdate if partial else ProductCreate
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)

    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(field_errors(e.errors())) from None
