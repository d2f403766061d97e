# catalog/main.py
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, settings as default_settings
from .core import ProductIn, VariantStockIn, VariantKeyIn
from .database import ProductStore, StoreError, build_store
from .logging_config import setup_logging
from .logic import (
    list_products_logic, create_product_logic, update_variant_stock_logic,
    delete_variant_logic, delete_product_logic,
)
from .models import Product

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


# ---------------------------
# Product listing
# ---------------------------
@router.get("/products", response_model=List[Product])
async def list_products(store: ProductStore = Depends(get_store)):
    return await list_products_logic(store)

@router.get("/products/category/{category}", response_model=List[Product])
async def list_products_by_category(category: str, store: ProductStore = Depends(get_store)):
    return await list_products_logic(store, category=category)

@router.get("/products/by-color/{color}", response_model=List[Product])
async def list_products_by_color(color: str, store: ProductStore = Depends(get_store)):
    return await list_products_logic(store, color=color)

@router.get("/products/by-size/{size}", response_model=List[Product])
async def list_products_by_size(size: str, store: ProductStore = Depends(get_store)):
    return await list_products_logic(store, size=size)

# ---------------------------
# Product writes
# ---------------------------
@router.post("/products", status_code=201, response_model=Product)
async def create_product(payload: ProductIn, store: ProductStore = Depends(get_store)):
    return await create_product_logic(store, payload)

@router.put("/products/{product_id}/variant")
async def update_variant_stock(product_id: str, payload: VariantStockIn, store: ProductStore = Depends(get_store)):
    return await update_variant_stock_logic(store, product_id, payload)

@router.delete("/products/{product_id}/variant")
async def delete_variant(product_id: str, payload: VariantKeyIn, store: ProductStore = Depends(get_store)):
    return await delete_variant_logic(store, product_id, payload)

@router.delete("/products/{product_id}")
async def delete_product(product_id: str, store: ProductStore = Depends(get_store)):
    return await delete_product_logic(store, product_id)


# ---------------------------
# Error rendering: every failure is {"error": message}
# ---------------------------
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())[1:])
        messages.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return JSONResponse({"error": "; ".join(messages) or "Invalid request"}, status_code=400)

async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def create_app(store: Optional[ProductStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the catalog application.

    ``store`` is used as-is when given (tests pass a ``MemoryProductStore``);
    otherwise one is built from ``settings`` when the app starts up, so
    importing this module never opens a database client.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.store is None:
            app.state.store = build_store(settings)
        try:
            await app.state.store.connect()
        except StoreError as exc:
            # Keep serving; requests will surface the failure as 500s.
            logger.error("MongoDB connection error: %s", exc)
        yield
        await app.state.store.close()

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router)
    return app


app = create_app()


def run():
    logger.info("Server running on http://localhost:%s", default_settings.catalog_port)
    uvicorn.run(app, host=default_settings.catalog_host, port=default_settings.catalog_port)


if __name__ == "__main__":
    run()
