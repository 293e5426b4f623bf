import logging
from typing import Dict, List

from pymongo import ReturnDocument
from pymongo.collection import Collection

from .core import NotFound, _doc_to_product, _parse_object_id, store_errors
from .models import Product, ProductIn, ProductUpdate

# This file contains the store logic behind every product endpoint.
# Each operation is a single round trip against the collection.

logger = logging.getLogger(__name__)


def create_product_logic(collection: Collection, payload: ProductIn) -> Product:
    doc = payload.model_dump(exclude_none=True)
    with store_errors():
        collection.insert_one(doc)
    logger.info(f"Created product {doc['_id']}")
    return _doc_to_product(doc)


def list_products_logic(collection: Collection) -> List[Product]:
    with store_errors():
        docs = list(collection.find())
    return [_doc_to_product(d) for d in docs]


def get_product_logic(collection: Collection, product_id: str) -> Product:
    oid = _parse_object_id(product_id)
    with store_errors():
        doc = collection.find_one({"_id": oid})
    if doc is None:
        raise NotFound()
    return _doc_to_product(doc)


def update_product_logic(collection: Collection, product_id: str, payload: ProductUpdate) -> Product:
    fields = payload.model_dump(exclude_unset=True)
    if not fields:
        return get_product_logic(collection, product_id)

    oid = _parse_object_id(product_id)
    with store_errors():
        doc = collection.find_one_and_update(
            {"_id": oid}, {"$set": fields}, return_document=ReturnDocument.AFTER
        )
    if doc is None:
        raise NotFound()
    logger.info(f"Updated product {product_id}: {sorted(fields)}")
    return _doc_to_product(doc)


def delete_product_logic(collection: Collection, product_id: str) -> Dict[str, str]:
    oid = _parse_object_id(product_id)
    with store_errors():
        result = collection.delete_one({"_id": oid})
    if result.deleted_count == 0:
        raise NotFound()
    logger.info(f"Deleted product {product_id}")
    return {"message": "Product deleted successfully"}
