# inventory/main.py
import logging
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .core import ProductIn
from .database import MemoryProductStore, open_store
from .errors import InventoryError, ValidationFailed
from .logic import (
    list_products_logic, create_product_logic,
    update_product_logic, delete_product_logic,
)
from .models import Product, DeleteResult

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    current = get_settings()
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("inventory").setLevel(current.LOG_LEVEL.upper())
    if getattr(app.state, "store", None) is None:
        app.state.store = open_store(current.STORE_URL)
    logger.info("Product store ready (%s)", current.STORE_URL)
    yield


app = FastAPI(title="shop-inventory", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_store(request: Request) -> MemoryProductStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        # Lifespan did not run (e.g. app mounted without startup events)
        store = request.app.state.store = open_store(get_settings().STORE_URL)
    return store


# ---------------------------
# Error handlers
# ---------------------------
@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Routing errors (unknown path, wrong method) raised by Starlette itself
_HTTP_CODES = {404: "not_found", 405: "method_not_allowed"}


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code = _HTTP_CODES.get(exc.status_code, "http_error")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "code": code},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    err = ValidationFailed("invalid product payload")
    details = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
        for e in exc.errors()
    ]
    return JSONResponse(status_code=err.status_code, content={**err.to_dict(), "details": details})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "internal server error", "code": "internal_error"})


# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/api/products", response_model=List[Product])
async def list_products(store: MemoryProductStore = Depends(get_store)):
    return await list_products_logic(store)


@app.post("/api/products", response_model=Product)
async def create_product(payload: ProductIn, store: MemoryProductStore = Depends(get_store)):
    return await create_product_logic(store, payload)


@app.put("/api/products/{product_id}", response_model=Product)
async def update_product(product_id: str, payload: ProductIn, store: MemoryProductStore = Depends(get_store)):
    return await update_product_logic(store, product_id, payload)


@app.delete("/api/products/{product_id}", response_model=DeleteResult)
async def delete_product(product_id: str, store: MemoryProductStore = Depends(get_store)):
    return await delete_product_logic(store, product_id)


@app.get("/health")
async def health():
    return {"status": "ok"}


def run():
    import uvicorn
    current = get_settings()
    uvicorn.run(app, host=current.HOST, port=current.PORT, log_level=current.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
