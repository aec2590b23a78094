#!/usr/bin/env python
from loopcart.config import load_client_settings
from loopcart_sdk import StoreClient
from loopcart.errors import NotFoundError


def main():
    c = StoreClient(base_url=load_client_settings().api_url)
    user_id = "demo-user"

    # -----------------------------
    # Health
    # -----------------------------
    print("Checking server...")
    print(c.health())

    # -----------------------------
    # Catalog
    # -----------------------------
    print("\nListing products...")
    products = c.list_products()
    print(f"{len(products)} products")

    print("\nListing 'electronics'...")
    for p in c.list_products("electronics"):
        print(f"  {p['id']:>3} {p['image']} {p['name']} ₹{p['price']} ({p['discount']}% off)")

    # -----------------------------
    # Cart
    # -----------------------------
    print("\nStarting with an empty cart...")
    print(c.clear_cart(user_id))

    print("\nAdding product 1 twice...")
    c.add_to_cart(user_id, 1)
    print(c.add_to_cart(user_id, 1))

    print("\nAdding an unknown product...")
    try:
        c.add_to_cart(user_id, 9999)
    except NotFoundError as e:
        print(f"  -> {e.message}")

    print("\nRemoving product 1...")
    print(c.remove_from_cart(user_id, 1))

    print("\nViewing cart...")
    print(c.view_cart(user_id))


if __name__ == "__main__":
    main()
