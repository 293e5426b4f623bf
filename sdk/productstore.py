# sdk/productstore.py
import requests
import httpx
from typing import Any, Dict, Optional
from rich import print

class StoreClient:
    def __init__(self, base_url: str = "http://localhost:5000", session: Optional[Any] = None, timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        # any requests.Session-compatible object (e.g. FastAPI's TestClient)
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _url(self, product_id: Optional[str] = None) -> str:
        url = f"{self.base_url}/api/products"
        return f"{url}/{product_id}" if product_id else url

    def create_product(self, name: str, price: float, stock: int, category: str,
                       description: Optional[str] = None, image: Optional[str] = None):
        payload: Dict[str, Any] = {"name": name, "price": price, "stock": stock, "category": category}
        if description is not None:
            payload["description"] = description
        if image is not None:
            payload["image"] = image
        r = self.session.post(self._url(), json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def list_products(self):
        r = self.session.get(self._url(), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_product(self, product_id: str):
        r = self.session.get(self._url(product_id), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # only the given fields are sent; the server keeps the rest
    def update_product(self, product_id: str, **fields):
        r = self.session.put(self._url(product_id), json=fields, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_product(self, product_id: str):
        r = self.session.delete(self._url(product_id), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    async def list_products_async(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        async with httpx.AsyncClient(timeout=self.timeout, transport=transport) as client:
            r = await client.get(self._url())
            r.raise_for_status()
            return r.json()


if __name__ == "__main__":
    import argparse
    import os

    parser = argparse.ArgumentParser(description="Product store CLI")
    parser.add_argument("--base-url", default=os.getenv("PRODUCT_API_URL", "http://127.0.0.1:5000"))
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-products", help="List all products")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True, help="ID of the product")

    cp = subparsers.add_parser("create-product", help="Create a new product")
    cp.add_argument("--name", required=True, help="Product name")
    cp.add_argument("--price", type=float, required=True, help="Price")
    cp.add_argument("--stock", type=int, required=True, help="Stock quantity")
    cp.add_argument("--category", required=True, help="Product category")
    cp.add_argument("--description", help="Product description")
    cp.add_argument("--image", help="Image URL")

    up = subparsers.add_parser("update-product", help="Update fields of a product")
    up.add_argument("--product-id", required=True, help="ID of the product")
    up.add_argument("--name")
    up.add_argument("--price", type=float)
    up.add_argument("--stock", type=int)
    up.add_argument("--category")
    up.add_argument("--description")
    up.add_argument("--image")

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", required=True, help="ID of the product")

    args = parser.parse_args()
    c = StoreClient(base_url=args.base_url)

    if args.command == "list-products":
        print(c.list_products())

    elif args.command == "get-product":
        print(c.get_product(args.product_id))

    elif args.command == "create-product":
        print(c.create_product(args.name, args.price, args.stock, args.category, args.description, args.image))

    elif args.command == "update-product":
        fields = {k: getattr(args, k) for k in ("name", "price", "stock", "category", "description", "image")
                  if getattr(args, k) is not None}
        print(c.update_product(args.product_id, **fields))

    elif args.command == "delete-product":
        print(c.delete_product(args.product_id))
