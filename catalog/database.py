"""
Product stores.

A store owns the products collection and performs exactly one round-trip
per operation.  ``MongoProductStore`` talks to MongoDB through PyMongo's
asyncio client; ``MemoryProductStore`` keeps documents in a dict and is
what the tests (and ``STORE_BACKEND=memory``) run against.  Both mint
ObjectId identifiers so ids look and validate the same either way.
"""

import asyncio
import copy
import logging
from contextlib import contextmanager
from typing import Dict, Any, List, Optional

from bson import ObjectId
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from .config import Settings
from .models import Product, UpdateOutcome

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """The underlying database failed or could not be reached."""


class InvalidProductId(ValueError):
    def __init__(self, product_id: str):
        super().__init__(f"Invalid product id: {product_id!r}")
        self.product_id = product_id


def _object_id(product_id: str) -> ObjectId:
    if not ObjectId.is_valid(product_id):
        raise InvalidProductId(product_id)
    return ObjectId(product_id)


def build_query(category: Optional[str] = None, color: Optional[str] = None,
                size: Optional[str] = None) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if category is not None:
        query["category"] = category
    if color is not None:
        query["variants.color"] = color
    if size is not None:
        query["variants.size"] = size
    return query


def _with_ids(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Assign ObjectIds to a new product document and each of its variants."""
    doc = dict(doc)
    doc["_id"] = ObjectId()
    doc["variants"] = [dict(v, _id=ObjectId()) for v in doc.get("variants", [])]
    return doc


def _to_product(doc: Dict[str, Any]) -> Product:
    variants = [dict(v, _id=str(v["_id"])) if "_id" in v else dict(v) for v in doc.get("variants", [])]
    return Product.model_validate({
        "_id": str(doc["_id"]),
        "name": doc["name"],
        "price": doc["price"],
        "category": doc["category"],
        "variants": variants,
    })


class ProductStore:
    """Interface shared by the store implementations."""

    async def connect(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def find_products(self, category: Optional[str] = None, color: Optional[str] = None,
                            size: Optional[str] = None) -> List[Product]:
        raise NotImplementedError

    async def create_product(self, doc: Dict[str, Any]) -> Product:
        raise NotImplementedError

    async def update_variant_stock(self, product_id: str, color: str, size: str, stock: int) -> UpdateOutcome:
        raise NotImplementedError

    async def delete_variant(self, product_id: str, color: str, size: str) -> UpdateOutcome:
        raise NotImplementedError

    async def delete_product(self, product_id: str) -> Optional[Product]:
        raise NotImplementedError


# ---------------------------
# In-memory store
# ---------------------------
class MemoryProductStore(ProductStore):
    def __init__(self):
        self.products: Dict[str, Dict[str, Any]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _get_lock(self, key: str) -> Optional[asyncio.Lock]:
        # Locks exist only for stored products so unknown ids leave no trace.
        if key not in self.products:
            return None
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    @staticmethod
    def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
        if "category" in query and doc["category"] != query["category"]:
            return False
        if "variants.color" in query and not any(v["color"] == query["variants.color"] for v in doc["variants"]):
            return False
        if "variants.size" in query and not any(v["size"] == query["variants.size"] for v in doc["variants"]):
            return False
        return True

    async def find_products(self, category=None, color=None, size=None):
        query = build_query(category, color, size)
        return [_to_product(doc) for doc in self.products.values() if self._matches(doc, query)]

    async def create_product(self, doc):
        stored = _with_ids(copy.deepcopy(doc))
        self.products[str(stored["_id"])] = stored
        return _to_product(stored)

    async def update_variant_stock(self, product_id, color, size, stock):
        key = str(_object_id(product_id))
        lock = self._get_lock(key)
        if lock is None:
            return UpdateOutcome(matched_count=0, modified_count=0)
        async with lock:
            doc = self.products.get(key)
            variant = None
            if doc is not None:
                variant = next((v for v in doc["variants"] if v["color"] == color and v["size"] == size), None)
            if variant is None:
                return UpdateOutcome(matched_count=0, modified_count=0)
            modified = 0 if variant["stock"] == stock else 1
            variant["stock"] = stock
            return UpdateOutcome(matched_count=1, modified_count=modified)

    async def delete_variant(self, product_id, color, size):
        key = str(_object_id(product_id))
        lock = self._get_lock(key)
        if lock is None:
            return UpdateOutcome(matched_count=0, modified_count=0)
        async with lock:
            doc = self.products.get(key)
            if doc is None:
                return UpdateOutcome(matched_count=0, modified_count=0)
            kept = [v for v in doc["variants"] if not (v["color"] == color and v["size"] == size)]
            modified = 1 if len(kept) != len(doc["variants"]) else 0
            doc["variants"] = kept
            return UpdateOutcome(matched_count=1, modified_count=modified)

    async def delete_product(self, product_id):
        key = str(_object_id(product_id))
        lock = self._get_lock(key)
        if lock is None:
            return None
        async with lock:
            doc = self.products.pop(key, None)
        self._locks.pop(key, None)
        return _to_product(doc) if doc is not None else None


# ---------------------------
# MongoDB store
# ---------------------------
@contextmanager
def _driver_errors():
    try:
        yield
    except PyMongoError as exc:
        raise StoreError(str(exc)) from exc


def _outcome(result) -> UpdateOutcome:
    upserted_id = result.upserted_id
    return UpdateOutcome(
        acknowledged=result.acknowledged,
        matched_count=result.matched_count,
        modified_count=result.modified_count,
        upserted_count=0 if upserted_id is None else 1,
        upserted_id=None if upserted_id is None else str(upserted_id),
    )


class MongoProductStore(ProductStore):
    def __init__(self, collection, client: Optional[AsyncMongoClient] = None):
        self._collection = collection
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoProductStore":
        client = AsyncMongoClient(settings.mongo_uri, serverSelectionTimeoutMS=settings.mongo_timeout_ms)
        return cls(client[settings.mongo_db][settings.mongo_collection], client=client)

    async def connect(self) -> None:
        if self._client is None:
            return
        with _driver_errors():
            await self._client.admin.command("ping")
        logger.info("Connected to MongoDB")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    async def find_products(self, category=None, color=None, size=None):
        with _driver_errors():
            docs = await self._collection.find(build_query(category, color, size)).to_list(None)
        return [_to_product(doc) for doc in docs]

    async def create_product(self, doc):
        stored = _with_ids(doc)
        with _driver_errors():
            await self._collection.insert_one(stored)
        return _to_product(stored)

    async def update_variant_stock(self, product_id, color, size, stock):
        # $elemMatch so color and size must hold on the same embedded entry;
        # the positional $ then points at that entry.
        query = {"_id": _object_id(product_id), "variants": {"$elemMatch": {"color": color, "size": size}}}
        with _driver_errors():
            result = await self._collection.update_one(query, {"$set": {"variants.$.stock": stock}})
        return _outcome(result)

    async def delete_variant(self, product_id, color, size):
        query = {"_id": _object_id(product_id)}
        with _driver_errors():
            result = await self._collection.update_one(query, {"$pull": {"variants": {"color": color, "size": size}}})
        return _outcome(result)

    async def delete_product(self, product_id):
        query = {"_id": _object_id(product_id)}
        with _driver_errors():
            doc = await self._collection.find_one_and_delete(query)
        return _to_product(doc) if doc is not None else None


def build_store(settings: Settings) -> ProductStore:
    if settings.store_backend == "memory":
        logger.info("Using in-memory product store")
        return MemoryProductStore()
    return MongoProductStore.from_settings(settings)
