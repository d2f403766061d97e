#!/usr/bin/env python
import requests
from sdk.catalog_client import CatalogClient

def main():
    c = CatalogClient(base_url="http://127.0.0.1:3000")

    # -----------------------------
    # Create products
    # -----------------------------
    print("Creating products...")
    shirt = c.create_product("Shirt", 19.99, "Tops", [
        {"color": "red", "size": "M", "stock": 5},
        {"color": "red", "size": "L", "stock": 2},
    ])
    hoodie = c.create_product("Hoodie", 49.0, "Tops", [{"color": "black", "size": "M", "stock": 1}])
    boots = c.create_product("Boots", 89.5, "Shoes", [{"color": "brown", "size": "42"}])
    print(shirt)
    print(hoodie)
    print(boots)

    # A price of 0 counts as missing
    try:
        c.create_product("Freebie", 0, "Tops")
    except requests.HTTPError as e:
        print("\nZero-price product rejected:", e.response.status_code, e.response.json())

    # -----------------------------
    # Listing and filters
    # -----------------------------
    print("\nListing products...")
    print(c.list_products())
    print("\nCategory 'Tops':", [p["name"] for p in c.list_by_category("Tops")])
    print("Color 'red':", [p["name"] for p in c.list_by_color("red")])
    print("Size 'M':", [p["name"] for p in c.list_by_size("M")])

    # -----------------------------
    # Variant updates
    # -----------------------------
    print("\nRestocking red/M shirts...")
    print(c.update_variant_stock(shirt["_id"], "red", "M", 12))

    print("\nDropping red/L shirts...")
    print(c.delete_variant(shirt["_id"], "red", "L"))

    # -----------------------------
    # Delete a product
    # -----------------------------
    print("\nDeleting boots...")
    print(c.delete_product(boots["_id"]))

    print("\nFinal catalog:")
    print(c.list_products())

if __name__ == "__main__":
    main()
