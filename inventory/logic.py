import logging
from typing import Dict, Any, List

from fastapi.concurrency import run_in_threadpool

from .core import ProductIn
from .database import MemoryProductStore, _get_lock
from .errors import NotFound

# This file contains the core logic for the product endpoints.
# Store calls may hit the disk, so they run in the threadpool, not on the event loop.

logger = logging.getLogger(__name__)

# Mutations share one lock so a file-backed store is never rewritten concurrently.
_WRITE_LOCK = "products:write"


async def list_products_logic(store: MemoryProductStore) -> List[Dict[str, Any]]:
    return await run_in_threadpool(store.list_all)


async def create_product_logic(store: MemoryProductStore, payload: ProductIn) -> Dict[str, Any]:
    async with _get_lock(_WRITE_LOCK):
        product = await run_in_threadpool(store.create, payload.model_dump())
    logger.info("Created product %s", product["id"])
    return product


async def update_product_logic(store: MemoryProductStore, product_id: str, payload: ProductIn) -> Dict[str, Any]:
    async with _get_lock(_WRITE_LOCK):
        product = await run_in_threadpool(store.update, product_id, payload.model_dump())
    if product is None:
        logger.warning("Update of unknown product %s", product_id)
        raise NotFound(f"product {product_id} not found")
    logger.info("Updated product %s", product_id)
    return product


async def delete_product_logic(store: MemoryProductStore, product_id: str) -> Dict[str, str]:
    async with _get_lock(_WRITE_LOCK):
        removed = await run_in_threadpool(store.delete, product_id)
    if removed:
        logger.info("Deleted product %s", product_id)
    else:
        logger.info("Delete of absent product %s ignored", product_id)
    return {"message": "Product deleted successfully"}
