import logging
from contextlib import contextmanager
from typing import Optional

from fastapi import HTTPException

from .core import ProductIn, VariantStockIn, VariantKeyIn, validate_product
from .database import ProductStore, StoreError, InvalidProductId

# This file contains the core logic for all catalog endpoints.

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(action: str):
    try:
        yield
    except InvalidProductId as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except StoreError as exc:
        logger.exception("Store failure while trying to %s", action)
        raise HTTPException(status_code=500, detail=str(exc))


# Product listing
async def list_products_logic(store: ProductStore, category: Optional[str] = None,
                              color: Optional[str] = None, size: Optional[str] = None):
    with _store_errors("list products"):
        return await store.find_products(category=category, color=color, size=size)

# Product creation
async def create_product_logic(store: ProductStore, payload: ProductIn):
    result = validate_product(payload)
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error)

    with _store_errors("create product"):
        product = await store.create_product(result.product)
    logger.info("Created product %s (%s)", product.id, product.name)
    return product

# Variant endpoints
async def update_variant_stock_logic(store: ProductStore, product_id: str, payload: VariantStockIn):
    with _store_errors("update variant stock"):
        outcome = await store.update_variant_stock(product_id, payload.color, payload.size, payload.stock)
    if outcome.matched_count == 0:
        raise HTTPException(status_code=404, detail="Variant not found")

    logger.info("Set stock of %s/%s on product %s to %s", payload.color, payload.size, product_id, payload.stock)
    return {"message": "Variant stock updated", "result": outcome}

async def delete_variant_logic(store: ProductStore, product_id: str, payload: VariantKeyIn):
    with _store_errors("delete variant"):
        outcome = await store.delete_variant(product_id, payload.color, payload.size)
    if outcome.modified_count == 0:
        raise HTTPException(status_code=404, detail="Variant not found")

    logger.info("Deleted variant %s/%s from product %s", payload.color, payload.size, product_id)
    return {"message": "Variant deleted", "result": outcome}

# Product deletion
async def delete_product_logic(store: ProductStore, product_id: str):
    with _store_errors("delete product"):
        deleted = await store.delete_product(product_id)
    if deleted is None:
        raise HTTPException(status_code=404, detail="Product not found")

    logger.info("Deleted product %s", product_id)
    return {"message": "Product deleted", "product": deleted}
