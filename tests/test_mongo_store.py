# tests/test_mongo_store.py
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from catalog.database import MongoProductStore, StoreError, InvalidProductId, build_query

PID = ObjectId()


def _doc(**overrides):
    doc = {
        "_id": PID,
        "name": "Shirt",
        "price": 19.99,
        "category": "Tops",
        "variants": [{"_id": ObjectId(), "color": "red", "size": "M", "stock": 2}],
    }
    doc.update(overrides)
    return doc

def _update_result(matched, modified):
    return SimpleNamespace(acknowledged=True, matched_count=matched, modified_count=modified, upserted_id=None)


def test_build_query_uses_embedded_variant_paths():
    assert build_query() == {}
    assert build_query(category="Tops") == {"category": "Tops"}
    assert build_query(color="red") == {"variants.color": "red"}
    assert build_query(size="M") == {"variants.size": "M"}

def test_find_products_converts_ids():
    collection = MagicMock()
    collection.find.return_value.to_list = AsyncMock(return_value=[_doc()])
    store = MongoProductStore(collection)

    products = asyncio.run(store.find_products(color="red"))

    collection.find.assert_called_once_with({"variants.color": "red"})
    assert products[0].id == str(PID)
    assert isinstance(products[0].variants[0].id, str)

def test_create_product_mints_ids():
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    store = MongoProductStore(collection)

    product = asyncio.run(store.create_product({
        "name": "Shirt", "price": 19.99, "category": "Tops",
        "variants": [{"color": "red", "size": "M", "stock": 0}],
    }))

    inserted = collection.insert_one.call_args.args[0]
    assert isinstance(inserted["_id"], ObjectId)
    assert isinstance(inserted["variants"][0]["_id"], ObjectId)
    assert product.id == str(inserted["_id"])

def test_update_variant_stock_matches_one_embedded_entry():
    collection = MagicMock()
    collection.update_one = AsyncMock(return_value=_update_result(1, 1))
    store = MongoProductStore(collection)

    outcome = asyncio.run(store.update_variant_stock(str(PID), "red", "M", 9))

    collection.update_one.assert_awaited_once_with(
        {"_id": PID, "variants": {"$elemMatch": {"color": "red", "size": "M"}}},
        {"$set": {"variants.$.stock": 9}},
    )
    assert outcome.matched_count == 1
    assert outcome.model_dump(by_alias=True)["modifiedCount"] == 1

def test_delete_variant_pulls_matching_entries():
    collection = MagicMock()
    collection.update_one = AsyncMock(return_value=_update_result(1, 0))
    store = MongoProductStore(collection)

    outcome = asyncio.run(store.delete_variant(str(PID), "red", "L"))

    collection.update_one.assert_awaited_once_with(
        {"_id": PID}, {"$pull": {"variants": {"color": "red", "size": "L"}}}
    )
    assert outcome.modified_count == 0

def test_delete_product_returns_prior_document_or_none():
    collection = MagicMock()
    collection.find_one_and_delete = AsyncMock(side_effect=[_doc(), None])
    store = MongoProductStore(collection)

    assert asyncio.run(store.delete_product(str(PID))).name == "Shirt"
    assert asyncio.run(store.delete_product(str(PID))) is None

def test_invalid_id_never_reaches_the_driver():
    collection = MagicMock()
    store = MongoProductStore(collection)
    with pytest.raises(InvalidProductId):
        asyncio.run(store.delete_product("not-an-id"))
    collection.find_one_and_delete.assert_not_called()

def test_driver_errors_become_store_errors():
    collection = MagicMock()
    collection.update_one = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
    store = MongoProductStore(collection)
    with pytest.raises(StoreError):
        asyncio.run(store.update_variant_stock(str(PID), "red", "M", 1))

def test_connect_pings_server():
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    client.close = AsyncMock()
    store = MongoProductStore(MagicMock(), client=client)

    asyncio.run(store.connect())
    asyncio.run(store.close())

    client.admin.command.assert_awaited_once_with("ping")
    client.close.assert_awaited_once()
