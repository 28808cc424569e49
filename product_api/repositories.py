from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator, List, Mapping, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from product_api.core.logging import get_logger
from product_api.errors import InvalidIdentifier, NotFoundError, StorageError
from product_api.models import Product, utcnow
from product_api.schemas import ProductCreate, ProductUpdate, validate_product

logger = get_logger(__name__)

UPDATABLE_FIELDS = ("name", "price", "description")


@contextmanager
def _storage(db: Session, operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Storage failure during %s", operation)
        raise StorageError(operation) from e


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _product_key(product_id: str) -> str:
    try:
        return str(UUID(product_id))
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdentifier(product_id) from None


def _load(db: Session, product_id: str) -> Product:
    key = _product_key(product_id)
    product = db.get(Product, key)
    if product is None:
        raise NotFoundError(product_id)
    return product


def create_product(db: Session, payload: Union[ProductCreate, Mapping[str, Any]]) -> Product:
    payload = validate_product(payload)
    now = utcnow()
    product = Product(
        name=payload.name,
        price=payload.price,
        description=payload.description,
        created_at=now,
        updated_at=now,
    )
    with _storage(db, "create"):
        db.add(product)
        db.commit()
        db.refresh(product)
    logger.info("Product created id=%s", product.id)
    return product


def list_products(db: Session) -> List[Product]:
    with _storage(db, "list"):
        return list(db.execute(select(Product).order_by(Product.created_at, Product.id)).scalars().all())


def get_product(db: Session, product_id: str) -> Product:
    with _storage(db, "get"):
        return _load(db, product_id)


def update_product(
    db: Session,
    product_id: str,
    changes: Union[ProductUpdate, Mapping[str, Any]],
) -> Product:
    """
    Apply a partial payload to the stored product.

    Only name, price and description can change; ``updated_at`` always
    moves forward, even when two writes land within the clock resolution.
    """
    changes = validate_product(changes, partial=True).changes()
    with _storage(db, "update"):
        product = _load(db, product_id)
        for field in UPDATABLE_FIELDS:
            if field in changes:
                setattr(product, field, changes[field])

        previous = _as_utc(product.updated_at)
        now = utcnow()
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        product.updated_at = now

        db.commit()
        db.refresh(product)
    logger.info("Product updated id=%s fields=%s", product.id, sorted(changes))
    return product


def delete_product(db: Session, product_id: str) -> None:
    with _storage(db, "delete"):
        product = _load(db, product_id)
        db.delete(product)
        db.commit()
    logger.info("Product deleted id=%s", product_id)
