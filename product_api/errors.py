"""Failure kinds raised by the product handlers and the store."""

from __future__ import annotations

from typing import Dict, List, Optional


class ProductApiError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(ProductApiError):
    """One or more product fields violate their rules."""

    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None) -> None:
        super().__init__(message)
        self.errors = errors

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]


class NotFoundError(ProductApiError):
    status_code = 404
    message = "Product not found"

    def __init__(self, product_id: str, message: Optional[str] = None) -> None:
        super().__init__(message)
        self.product_id = product_id


class InvalidIdentifier(NotFoundError):
    """The identifier is not a well-formed store key; reported as not found."""


class StorageError(ProductApiError):
    """The store is unreachable or rejected the operation."""

    def __init__(self, operation: str) -> None:
        super().__init__()
        self.operation = operation

    def __str__(self) -> str:
        return f"storage failure during {self.operation}"
