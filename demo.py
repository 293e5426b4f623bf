#!/usr/bin/env python
import os

import requests
from sdk.productstore import StoreClient

def main():
    c = StoreClient(base_url=os.getenv("PRODUCT_API_URL", "http://127.0.0.1:5000"))

    # -----------------------------
    # Create products
    # -----------------------------
    print("Creating products...")
    laptop = c.create_product("Laptop", 1500, 3, "electronics", description="14 inch")
    mouse = c.create_product("Mouse", 25.5, 10, "electronics", image="https://example.com/mouse.png")
    print(laptop)
    print(mouse)

    # -----------------------------
    # List products
    # -----------------------------
    print("\nListing products...")
    print(c.list_products())

    # -----------------------------
    # Update a single field
    # -----------------------------
    print("\nDropping the laptop price...")
    print(c.update_product(laptop["id"], price=1299))

    # -----------------------------
    # Fetch, delete, fetch again
    # -----------------------------
    print("\nFetching the mouse...")
    print(c.get_product(mouse["id"]))

    print("\nDeleting products...")
    print(c.delete_product(laptop["id"]))
    print(c.delete_product(mouse["id"]))

    try:
        c.get_product(laptop["id"])
    except requests.exceptions.HTTPError as e:
        print(f"\nLaptop is gone: {e.response.status_code} {e.response.json()['message']}")

if __name__ == "__main__":
    main()
