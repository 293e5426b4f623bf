from contextlib import contextmanager
from typing import Any, Dict, List

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from .models import Product

# Error kinds raised by the store accessor and mapped to HTTP responses in main.py


class ProductStoreError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ProductStoreError):
    status_code = 400


class NotFound(ProductStoreError):
    status_code = 404

    def __init__(self, message: str = "Product not found"):
        super().__init__(message)


class StoreError(ProductStoreError):
    status_code = 500


@contextmanager
def store_errors():
    try:
        yield
    except PyMongoError as e:
        raise StoreError(str(e)) from e


# ---------------------------
# Helpers
# ---------------------------
def _parse_object_id(product_id: str) -> ObjectId:
    # a malformed id can never match a stored document
    try:
        return ObjectId(product_id)
    except (InvalidId, TypeError):
        raise NotFound()


def _doc_to_product(doc: Dict[str, Any]) -> Product:
    data = {k: v for k, v in doc.items() if k != "_id"}
    try:
        return Product(id=str(doc["_id"]), **data)
    except PydanticValidationError as e:
        raise StoreError(f"Stored product {doc['_id']} is malformed: {format_validation_errors(e.errors())}") from e


def format_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """Flatten pydantic error dicts into one readable line, e.g. ``name: Field required``."""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        field = ".".join(loc)
        parts.append(f"{field}: {err['msg']}" if field else err["msg"])
    return "; ".join(parts) or "Invalid request body"
