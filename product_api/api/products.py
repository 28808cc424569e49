from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from product_api.core.deps import get_db, product_create_body, product_update_body
from product_api.repositories import (
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)
from product_api.schemas import (
    MessageEnvelope,
    ProductCreate,
    ProductEnvelope,
    ProductListEnvelope,
    ProductRead,
    ProductUpdate,
)

router = APIRouter(prefix="/products", tags=["products"])


def _request_body(model) -> dict:
    schema = model.model_json_schema()
    return {
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": schema},
                "application/x-www-form-urlencoded": {"schema": schema},
            },
        }
    }


@router.get("", response_model=ProductListEnvelope)
def http_list_products(db: Session = Depends(get_db)):
    items = [ProductRead.model_validate(p) for p in list_products(db)]
    return ProductListEnvelope(count=len(items), data=items)


@router.get("/{product_id}", response_model=ProductEnvelope)
def http_get_product(product_id: str, db: Session = Depends(get_db)):
    return ProductEnvelope(data=ProductRead.model_validate(get_product(db, product_id)))


@router.post(
    "",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=_request_body(ProductCreate),
)
def http_create_product(
    payload: ProductCreate = Depends(product_create_body),
    db: Session = Depends(get_db),
):
    return ProductEnvelope(data=ProductRead.model_validate(create_product(db, payload)))


@router.put("/{product_id}", response_model=ProductEnvelope, openapi_extra=_request_body(ProductUpdate))
def http_update_product(
    product_id: str,
    payload: ProductUpdate = Depends(product_update_body),
    db: Session = Depends(get_db),
):
    product = update_product(db, product_id, payload)
    return ProductEnvelope(data=ProductRead.model_validate(product))


@router.delete("/{product_id}", response_model=MessageEnvelope)
def http_delete_product(product_id: str, db: Session = Depends(get_db)):
    delete_product(db, product_id)
    return MessageEnvelope(message="Product deleted successfully")
