import asyncio
from sdk.catalog_client import CatalogClient

async def restock(client, product_id, color, size, stock):
    r = await client.update_variant_stock_async(product_id, color, size, stock)
    if r.status_code == 200:
        result = r.json()["result"]
        print(f"✅ {color}/{size} -> {stock} (matched {result['matchedCount']}, modified {result['modifiedCount']})")
    elif r.status_code == 404:
        print(f"❌ {color}/{size} not found on {product_id}")
    else:
        print(f"❌ {color}/{size} failed with {r.status_code}: {r.text}")

async def main():
    c = CatalogClient(base_url="http://127.0.0.1:3000")

    product = c.create_product("Tee", 15.0, "Tops", [
        {"color": "blue", "size": "S", "stock": 1},
        {"color": "blue", "size": "M", "stock": 1},
    ])
    product_id = product["_id"]
    print(f"\n👕 Created product: {product}")

    # Each update is one atomic store call; both should land
    print("\n⚡ Updating two variants concurrently...")
    await asyncio.gather(
        restock(c, product_id, "blue", "S", 10),
        restock(c, product_id, "blue", "M", 20),
        restock(c, product_id, "blue", "XL", 5),
    )

    final = [p for p in c.list_products() if p["_id"] == product_id]
    print("\n📦 Final product state:", final)

if __name__ == "__main__":
    asyncio.run(main())
