# loopcart_sdk/shopper.py
import logging
import math
import time
from typing import Any, Dict, List, Optional

import requests

from loopcart.errors import EmptyCartError, NotLoggedInError

from .client import StoreClient
from .storage import LocalStorage

logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "currentUser"
CART_KEY = "cart"

# Shown when the server cannot be reached.
FALLBACK_PRODUCTS: List[Dict[str, Any]] = [
    {"id": 1, "name": "Samsung Phone", "price": 15999, "category": "Electronics", "image": "📱",
     "description": "Latest smartphone with great features", "discount": 10},
    {"id": 2, "name": "Cotton Shirt", "price": 799, "category": "Clothing", "image": "👕",
     "description": "Premium cotton fabric", "discount": 20},
    {"id": 3, "name": "Programming Book", "price": 599, "category": "Books", "image": "📚",
     "description": "Learn programming easily", "discount": 15},
]

# Failures that make the shopper fall back to its local copy.
API_ERRORS = (requests.RequestException, ValueError)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def discounted_price(price: int, discount: int) -> int:
    return round_half_up(price - price * (discount or 0) / 100)


def totals(cart: List[Dict[str, Any]]) -> Dict[str, int]:
    subtotal = sum(item["price"] * item["quantity"] for item in cart)
    discount = sum(item["price"] * (item.get("discount") or 0) / 100 * item["quantity"] for item in cart)
    return {
        "subtotal": subtotal,
        "discount": round_half_up(discount),
        "total": round_half_up(subtotal - discount),
    }


def search(products: List[Dict[str, Any]], term: str) -> List[Dict[str, Any]]:
    needle = term.strip().lower()
    if not needle:
        return list(products)
    return [
        p for p in products
        if needle in p.get("name", "").lower()
        or needle in (p.get("description") or "").lower()
        or needle in p.get("category", "").lower()
    ]


class Shopper:
    """
    Client-side storefront state.

    Keeps a local mirror of the current user and cart. Any successful server
    response overwrites the mirror; when the server cannot be reached the
    local copy is used as-is and the caller is not told.
    """

    def __init__(self, client: StoreClient, storage: LocalStorage):
        self.client = client
        self.storage = storage

    # ---------------------------
    # Local state
    # ---------------------------
    @property
    def current_user(self) -> Optional[Dict[str, Any]]:
        return self.storage.get_json(CURRENT_USER_KEY)

    @property
    def cart(self) -> List[Dict[str, Any]]:
        return self.storage.get_json(CART_KEY) or []

    def _save_cart(self, cart: List[Dict[str, Any]]) -> None:
        self.storage.set_json(CART_KEY, cart)

    def _require_user(self) -> Dict[str, Any]:
        user = self.current_user
        if not user:
            raise NotLoggedInError()
        return user

    def cart_count(self) -> int:
        return sum(item["quantity"] for item in self.cart)

    # ---------------------------
    # Session
    # ---------------------------
    def login(self, name: str, email: str) -> Dict[str, Any]:
        if not name or not email:
            raise ValueError("Please enter your name and email")
        user = {"id": str(int(time.time() * 1000)), "name": name, "email": email}
        self.storage.set_json(CURRENT_USER_KEY, user)
        return user

    def logout(self) -> None:
        self.storage.remove_item(CURRENT_USER_KEY)

    # ---------------------------
    # Catalog
    # ---------------------------
    def load_products(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            return self.client.list_products(category)
        except API_ERRORS as e:
            logger.info("using fallback products: %s", e)
        if not category:
            return list(FALLBACK_PRODUCTS)
        return [p for p in FALLBACK_PRODUCTS if p["category"].lower() == category.lower()]

    # ---------------------------
    # Cart
    # ---------------------------
    def sync_cart(self) -> List[Dict[str, Any]]:
        cart = self.cart
        user = self.current_user
        if not user:
            return cart
        try:
            server_cart = self.client.view_cart(user["id"])
        except API_ERRORS as e:
            logger.info("using local cart data: %s", e)
            return cart
        # an empty server cart never wipes the local one
        if server_cart:
            cart = server_cart
            self._save_cart(cart)
        return cart

    def add_to_cart(self, product_id: int) -> List[Dict[str, Any]]:
        user = self._require_user()
        try:
            result = self.client.add_to_cart(user["id"], product_id, 1)
        except API_ERRORS as e:
            logger.info("cart add failed, updating local cart: %s", e)
            return self._add_local(product_id)
        if result.get("success"):
            self._save_cart(result["cart"])
        return self.cart

    def _add_local(self, product_id: int) -> List[Dict[str, Any]]:
        cart = self.cart
        product = next((p for p in self.load_products() if p["id"] == product_id), None)
        if product is None:
            return cart
        for item in cart:
            if item["productId"] == product_id:
                item["quantity"] += 1
                break
        else:
            cart.append({
                "productId": product["id"],
                "quantity": 1,
                "name": product["name"],
                "price": product["price"],
                "image": product.get("image") or "📦",
                "discount": product.get("discount", 0),
                "category": product.get("category", ""),
            })
        self._save_cart(cart)
        return cart

    def update_quantity(self, product_id: int, change: int) -> List[Dict[str, Any]]:
        cart = self.cart
        item = next((it for it in cart if it["productId"] == product_id), None)
        if item is None:
            return cart

        item["quantity"] += change
        keep = item["quantity"] > 0
        if not keep:
            cart.remove(item)

        user = self.current_user
        if user:
            try:
                if keep:
                    self.client.add_to_cart(user["id"], product_id, change)
                else:
                    self.client.remove_from_cart(user["id"], product_id)
            except API_ERRORS as e:
                logger.info("using local cart update: %s", e)

        self._save_cart(cart)
        return self.sync_cart()

    def remove_from_cart(self, product_id: int) -> List[Dict[str, Any]]:
        user = self.current_user
        if user:
            try:
                self.client.remove_from_cart(user["id"], product_id)
            except API_ERRORS as e:
                logger.info("using local cart removal: %s", e)

        cart = [item for item in self.cart if item["productId"] != product_id]
        self._save_cart(cart)
        return self.sync_cart()

    def checkout(self) -> Dict[str, int]:
        cart = self.cart
        if not cart:
            raise EmptyCartError()
        summary = totals(cart)

        user = self.current_user
        if user:
            try:
                self.client.clear_cart(user["id"])
            except API_ERRORS as e:
                logger.info("using local cart clear: %s", e)

        self._save_cart([])
        return summary
