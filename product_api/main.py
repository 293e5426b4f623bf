# product_api/main.py
import logging
import sys
from contextlib import asynccontextmanager
from typing import List

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.collection import Collection

from . import database
from .config import ConfigError, Settings, setup_logging
from .core import ProductStoreError, StoreError, format_validation_errors
from .database import get_collection
from .logic import (
    create_product_logic, list_products_logic, get_product_logic,
    update_product_logic, delete_product_logic
)
from .models import Message, Product, ProductIn, ProductUpdate

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # connects when served directly by uvicorn; run() has already connected otherwise
    settings = Settings.load()
    setup_logging(settings.log_config, settings.log_level)
    database.connect(settings)
    yield


app = FastAPI(title="product-store-api", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------
# Error handling
# ---------------------------
@app.exception_handler(ProductStoreError)
async def product_store_error_handler(request: Request, exc: ProductStoreError):
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(level, f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} failed unexpectedly: {exc}")
    return JSONResponse(status_code=500, content={"message": str(exc) or exc.__class__.__name__})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    message = format_validation_errors(exc.errors())
    logger.warning(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse(status_code=400, content={"message": message})


@app.get("/health", response_class=PlainTextResponse)
def health():
    return "ok"


# ---------------------------
# Product endpoints
# ---------------------------
@app.post("/api/products", response_model=Product, status_code=201)
def create_product(payload: ProductIn, collection: Collection = Depends(get_collection)):
    return create_product_logic(collection, payload)

@app.get("/api/products", response_model=List[Product])
def list_products(collection: Collection = Depends(get_collection)):
    return list_products_logic(collection)

@app.get("/api/products/{product_id}", response_model=Product)
def get_product(product_id: str, collection: Collection = Depends(get_collection)):
    return get_product_logic(collection, product_id)

@app.put("/api/products/{product_id}", response_model=Product)
def update_product(product_id: str, payload: ProductUpdate, collection: Collection = Depends(get_collection)):
    return update_product_logic(collection, product_id, payload)

@app.delete("/api/products/{product_id}", response_model=Message)
def delete_product(product_id: str, collection: Collection = Depends(get_collection)):
    return delete_product_logic(collection, product_id)


# ---------------------------
# Entry point
# ---------------------------
def run():
    try:
        settings = Settings.load()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    setup_logging(settings.log_config, settings.log_level)
    try:
        database.connect(settings)
    except StoreError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"Server is running on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
