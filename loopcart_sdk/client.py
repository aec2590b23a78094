# loopcart_sdk/client.py
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import requests
from rich import print

from loopcart.errors import NotFoundError


class StoreClient:
    def __init__(self, base_url: str = "http://127.0.0.1:5000", timeout: int = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api{path}"

    def health(self) -> Dict[str, Any]:
        r = self.session.get(self._url("/health"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Products
    def list_products(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        if category:
            path = f"/products/category/{quote(category, safe='')}"
        else:
            path = "/products"
        r = self.session.get(self._url(path), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Cart
    def view_cart(self, user_id: str) -> List[Dict[str, Any]]:
        r = self.session.get(self._url(f"/cart/{quote(str(user_id), safe='')}"),
                             timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def add_to_cart(self, user_id: str, product_id: int, quantity: int = 1) -> Dict[str, Any]:
        r = self.session.post(self._url("/cart/add"), json={
            "userId": user_id, "productId": product_id, "quantity": quantity
        }, timeout=self.timeout)
        # unknown product is a domain error, not a transport failure
        if r.status_code == 404:
            raise NotFoundError(r.json().get("error", "Product not found"))
        r.raise_for_status()
        return r.json()

    def remove_from_cart(self, user_id: str, product_id: int) -> Dict[str, Any]:
        r = self.session.post(self._url("/cart/remove"), json={
            "userId": user_id, "productId": product_id
        }, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def clear_cart(self, user_id: str) -> Dict[str, Any]:
        r = self.session.post(self._url("/cart/clear"), json={"userId": user_id}, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Async add (example)
    async def add_to_cart_async(self, user_id: str, product_id: int, quantity: int = 1) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self._url("/cart/add"), json={
                "userId": user_id, "productId": product_id, "quantity": quantity
            })


def main(argv: Optional[List[str]] = None) -> None:
    import argparse

    from loopcart.config import load_client_settings

    settings = load_client_settings()
    parser = argparse.ArgumentParser(description="LoopCart CLI")
    parser.add_argument("--url", default=settings.api_url, help="Server base URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("health", help="Check the server is up")

    lp = subparsers.add_parser("list-products", help="List all products")
    lp.add_argument("--category", help="Filter products by category")

    vc = subparsers.add_parser("view-cart", help="View cart contents")
    vc.add_argument("--user", required=True, help="User id")

    add = subparsers.add_parser("add-to-cart", help="Add product to cart")
    add.add_argument("--user", required=True, help="User id")
    add.add_argument("--product-id", type=int, required=True, help="Product ID")
    add.add_argument("--qty", type=int, default=1, help="Quantity to add (negative to decrement)")

    rm = subparsers.add_parser("remove-from-cart", help="Remove product from cart")
    rm.add_argument("--user", required=True, help="User id")
    rm.add_argument("--product-id", type=int, required=True, help="Product ID")

    cc = subparsers.add_parser("clear-cart", help="Empty the cart")
    cc.add_argument("--user", required=True, help="User id")

    args = parser.parse_args(argv)
    c = StoreClient(base_url=args.url, timeout=settings.timeout)

    if args.command == "health":
        print(c.health())
    elif args.command == "list-products":
        print(c.list_products(args.category))
    elif args.command == "view-cart":
        print(c.view_cart(args.user))
    elif args.command == "add-to-cart":
        try:
            print(c.add_to_cart(args.user, args.product_id, args.qty))
        except NotFoundError as e:
            print(f"[red]{e.message}[/red]")
    elif args.command == "remove-from-cart":
        print(c.remove_from_cart(args.user, args.product_id))
    elif args.command == "clear-cart":
        print(c.clear_cart(args.user))


if __name__ == "__main__":
    main()
