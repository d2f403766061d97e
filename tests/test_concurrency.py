# tests/test_concurrency.py
import asyncio
import httpx
from catalog.main import create_app
from catalog.database import MemoryProductStore

async def _update(ac, product_id, color, size, stock):
    return await ac.put(f"/products/{product_id}/variant", json={"color": color, "size": size, "stock": stock})

async def _run():
    store = MemoryProductStore()
    app = create_app(store=store)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        r = await ac.post("/products", json={
            "name": "Tee", "price": 15, "category": "Tops",
            "variants": [{"color": "blue", "size": "S"}, {"color": "blue", "size": "M"}],
        })
        pid = r.json()["_id"]
        results = await asyncio.gather(
            _update(ac, pid, "blue", "S", 10),
            _update(ac, pid, "blue", "M", 20),
            _update(ac, pid, "blue", "XL", 5),
        )
        products = (await ac.get("/products")).json()
    return results, products

def test_concurrent_variant_updates():
    results, products = asyncio.run(_run())
    assert [r.status_code for r in results] == [200, 200, 404]
    stocks = {v["size"]: v["stock"] for v in products[0]["variants"]}
    assert stocks == {"S": 10, "M": 20}
