# sdk/catalog_client.py
import requests
import httpx
from typing import Any, Dict, List, Optional
from urllib.parse import quote
from rich import print


class CatalogClient:
    def __init__(self, base_url: str = "http://localhost:3000", timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url] + [quote(str(p), safe="") for p in parts])

    def _get(self, *parts: str):
        r = self.session.get(self._url(*parts), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Listing
    def list_products(self) -> List[Dict[str, Any]]:
        return self._get("products")

    def list_by_category(self, category: str) -> List[Dict[str, Any]]:
        return self._get("products", "category", category)

    def list_by_color(self, color: str) -> List[Dict[str, Any]]:
        return self._get("products", "by-color", color)

    def list_by_size(self, size: str) -> List[Dict[str, Any]]:
        return self._get("products", "by-size", size)

    # Products
    def create_product(self, name: str, price: float, category: str, variants: Optional[List[Dict[str, Any]]] = None):
        payload: Dict[str, Any] = {"name": name, "price": price, "category": category}
        if variants is not None:
            payload["variants"] = variants
        r = self.session.post(self._url("products"), json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_product(self, product_id: str):
        r = self.session.delete(self._url("products", product_id), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Variants
    def update_variant_stock(self, product_id: str, color: str, size: str, stock: int):
        payload = {"color": color, "size": size, "stock": int(stock)}
        r = self.session.put(self._url("products", product_id, "variant"), json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_variant(self, product_id: str, color: str, size: str):
        payload = {"color": color, "size": size}
        r = self.session.delete(self._url("products", product_id, "variant"), json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Async stock update; returns the response so callers can inspect 404s
    async def update_variant_stock_async(self, product_id: str, color: str, size: str, stock: int):
        payload = {"color": color, "size": size, "stock": int(stock)}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.put(self._url("products", product_id, "variant"), json=payload)
            return r


if __name__ == "__main__":
    import argparse
    import json

    parser = argparse.ArgumentParser(description="Catalog CLI")
    parser.add_argument("--base-url", default="http://127.0.0.1:3000", help="Catalog service URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---------------------------
    # Listing commands
    # ---------------------------
    subparsers.add_parser("list-products", help="List all products")

    lc = subparsers.add_parser("by-category", help="List products in a category")
    lc.add_argument("--category", required=True)

    lcol = subparsers.add_parser("by-color", help="List products having a variant of this color")
    lcol.add_argument("--color", required=True)

    ls = subparsers.add_parser("by-size", help="List products having a variant of this size")
    ls.add_argument("--size", required=True)

    # ---------------------------
    # Product commands
    # ---------------------------
    cp = subparsers.add_parser("create-product", help="Create a product")
    cp.add_argument("--name", required=True, help="Product name")
    cp.add_argument("--price", type=float, required=True, help="Price")
    cp.add_argument("--category", required=True, help="Product category")
    cp.add_argument("--variants", help='JSON list, e.g. \'[{"color":"red","size":"M","stock":3}]\'')

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", required=True)

    # ---------------------------
    # Variant commands
    # ---------------------------
    us = subparsers.add_parser("update-stock", help="Set the stock of one variant")
    us.add_argument("--product-id", required=True)
    us.add_argument("--color", required=True)
    us.add_argument("--size", required=True)
    us.add_argument("--stock", type=int, required=True)

    dv = subparsers.add_parser("delete-variant", help="Remove a variant from a product")
    dv.add_argument("--product-id", required=True)
    dv.add_argument("--color", required=True)
    dv.add_argument("--size", required=True)

    # ---------------------------
    # Parse and execute
    # ---------------------------
    args = parser.parse_args()
    c = CatalogClient(base_url=args.base_url)

    if args.command == "list-products":
        print(c.list_products())

    elif args.command == "by-category":
        print(c.list_by_category(args.category))

    elif args.command == "by-color":
        print(c.list_by_color(args.color))

    elif args.command == "by-size":
        print(c.list_by_size(args.size))

    elif args.command == "create-product":
        variants = json.loads(args.variants) if args.variants else None
        print(c.create_product(args.name, args.price, args.category, variants))

    elif args.command == "delete-product":
        print(c.delete_product(args.product_id))

    elif args.command == "update-stock":
        print(c.update_variant_stock(args.product_id, args.color, args.size, args.stock))

    elif args.command == "delete-variant":
        print(c.delete_variant(args.product_id, args.color, args.size))
