from typing import Any, Generator

from fastapi import Request
from sqlalchemy.orm import Session

from product_api.errors import ValidationError
from product_api.schemas import ProductCreate, ProductUpdate, validate_product

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_db(request: Request) -> Generator[Session, None, None]:
    yield from request.app.state.db.session_scope()


def _body_error(message: str) -> ValidationError:
    return ValidationError([{"field": "body", "message": message}])


async def read_payload(request: Request) -> Any:
    """
    Return the request body as plain data, from JSON or a submitted form.

    Form values arrive as strings; the product rules coerce them.
    """
    content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return dict(form)

    if not await request.body():
        raise _body_error("Request body is required")
    try:
        return await request.json()
    except ValueError:
        raise _body_error("Malformed JSON body") from None


async def product_create_body(request: Request) -> ProductCreate:
    return validate_product(await read_payload(request))


async def product_update_body(request: Request) -> ProductUpdate:
    return validate_product(await read_payload(request), partial=True)
