# tests/test_shopper.py
import pytest
import requests

from loopcart.errors import EmptyCartError, NotFoundError, NotLoggedInError
from loopcart_sdk import LocalStorage, Shopper, StoreClient
from loopcart_sdk.shopper import FALLBACK_PRODUCTS, discounted_price, search, totals


class _TestSession:
    """Routes StoreClient calls into the ASGI app."""

    def __init__(self, test_client):
        self.test_client = test_client
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(("GET", url, None))
        return self.test_client.get(url)

    def post(self, url, json=None, timeout=None):
        self.calls.append(("POST", url, json))
        return self.test_client.post(url, json=json)


class _DownSession:
    def get(self, url, timeout=None):
        raise requests.ConnectionError(f"cannot reach {url}")

    def post(self, url, json=None, timeout=None):
        raise requests.ConnectionError(f"cannot reach {url}")


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "storage.json"))


@pytest.fixture
def session(client):
    return _TestSession(client)


@pytest.fixture
def shopper(session, storage):
    return Shopper(StoreClient(base_url="http://testserver", session=session), storage)


@pytest.fixture
def offline(storage):
    return Shopper(StoreClient(base_url="http://offline.invalid", session=_DownSession()), storage)


# ---------------------------
# Local storage
# ---------------------------
def test_storage_roundtrip_and_missing_file(storage):
    assert storage.get_item("cart") is None
    assert storage.get_json("cart", []) == []
    storage.set_json("cart", [{"productId": 1, "quantity": 2}])
    assert storage.get_item("cart") == '[{"productId": 1, "quantity": 2}]'
    assert LocalStorage(str(storage.path)).get_json("cart") == [{"productId": 1, "quantity": 2}]
    storage.remove_item("cart")
    assert storage.get_item("cart") is None


def test_storage_ignores_corrupt_file(storage):
    storage.path.write_text("{not json", encoding="utf-8")
    assert storage.get_json("currentUser") is None
    storage.set_json("currentUser", {"id": "1"})
    assert storage.get_json("currentUser") == {"id": "1"}


# ---------------------------
# Pure helpers
# ---------------------------
def test_discounted_price_rounds_half_up():
    assert discounted_price(18999, 15) == 16149
    assert discounted_price(499, 25) == 374
    assert discounted_price(10, 25) == 8  # 7.5


def test_totals():
    cart = [
        {"productId": 1, "quantity": 2, "price": 18999, "discount": 15},
        {"productId": 9, "quantity": 1, "price": 299, "discount": 25},
    ]
    assert totals(cart) == {"subtotal": 38297, "discount": 5774, "total": 32523}
    assert totals([]) == {"subtotal": 0, "discount": 0, "total": 0}


def test_search_matches_name_description_category():
    products = FALLBACK_PRODUCTS
    assert [p["id"] for p in search(products, "phone")] == [1]
    assert [p["id"] for p in search(products, "COTTON")] == [2]
    assert [p["id"] for p in search(products, "books")] == [3]
    assert search(products, "  ") == products


# ---------------------------
# Session
# ---------------------------
def test_login_persists_user(shopper, storage):
    user = shopper.login("Asha", "asha@example.com")
    assert user["id"].isdigit()
    assert storage.get_json("currentUser") == user
    shopper.logout()
    assert shopper.current_user is None


def test_login_requires_name_and_email(shopper):
    with pytest.raises(ValueError):
        shopper.login("", "asha@example.com")


def test_add_requires_login(shopper):
    with pytest.raises(NotLoggedInError):
        shopper.add_to_cart(1)


# ---------------------------
# Online
# ---------------------------
def test_load_products_online(shopper):
    assert len(shopper.load_products()) == 15
    assert [p["id"] for p in shopper.load_products("books")] == [7, 8, 9]


def test_add_to_cart_mirrors_server(shopper, store):
    user = shopper.login("Asha", "asha@example.com")
    shopper.add_to_cart(1)
    cart = shopper.add_to_cart(1)
    assert [(it["productId"], it["quantity"]) for it in cart] == [(1, 2)]
    assert shopper.cart == cart
    assert store.get(user["id"])[0].quantity == 2
    assert shopper.cart_count() == 2


def test_add_unknown_product_raises(shopper):
    shopper.login("Asha", "asha@example.com")
    with pytest.raises(NotFoundError):
        shopper.add_to_cart(9999)
    assert shopper.cart == []


def test_update_quantity_sends_delta(shopper, session, store):
    user = shopper.login("Asha", "asha@example.com")
    shopper.add_to_cart(2)
    shopper.add_to_cart(2)
    cart = shopper.update_quantity(2, -1)
    assert cart[0]["quantity"] == 1
    assert store.get(user["id"])[0].quantity == 1
    assert ("POST", "http://testserver/api/cart/add",
            {"userId": user["id"], "productId": 2, "quantity": -1}) in session.calls


def test_update_quantity_to_zero_removes(shopper, store):
    user = shopper.login("Asha", "asha@example.com")
    shopper.add_to_cart(2)
    cart = shopper.update_quantity(2, -1)
    assert cart == []
    assert store.get(user["id"]) == []


def test_remove_from_cart(shopper, store):
    user = shopper.login("Asha", "asha@example.com")
    shopper.add_to_cart(1)
    shopper.add_to_cart(4)
    cart = shopper.remove_from_cart(1)
    assert [it["productId"] for it in cart] == [4]
    assert [it.product_id for it in store.get(user["id"])] == [4]


def test_sync_cart_prefers_non_empty_server_cart(shopper, store, storage):
    user = shopper.login("Asha", "asha@example.com")
    store.add(user["id"], 5)
    storage.set_json("cart", [])
    assert [it["productId"] for it in shopper.sync_cart()] == [5]
    assert [it["productId"] for it in shopper.cart] == [5]


def test_sync_cart_keeps_local_when_server_empty(shopper, storage):
    shopper.login("Asha", "asha@example.com")
    local = [{"productId": 3, "quantity": 1, "name": "x", "price": 10, "image": "📦"}]
    storage.set_json("cart", local)
    assert shopper.sync_cart() == local


def test_checkout_clears_both_sides(shopper, store):
    user = shopper.login("Asha", "asha@example.com")
    shopper.add_to_cart(1)
    summary = shopper.checkout()
    assert summary == {"subtotal": 18999, "discount": 2850, "total": 16149}
    assert shopper.cart == []
    assert store.get(user["id"]) == []


def test_checkout_empty_cart(shopper):
    with pytest.raises(EmptyCartError):
        shopper.checkout()


# ---------------------------
# Offline fallback
# ---------------------------
def test_load_products_falls_back(offline):
    assert offline.load_products() == FALLBACK_PRODUCTS
    assert [p["id"] for p in offline.load_products("clothing")] == [2]


def test_add_to_cart_offline_uses_local_cart(offline):
    offline.login("Asha", "asha@example.com")
    offline.add_to_cart(1)
    cart = offline.add_to_cart(1)
    assert len(cart) == 1
    assert cart[0]["productId"] == 1
    assert cart[0]["quantity"] == 2
    assert cart[0]["name"] == "Samsung Phone"


def test_add_to_cart_offline_unknown_product_is_ignored(offline):
    offline.login("Asha", "asha@example.com")
    assert offline.add_to_cart(42) == []


def test_offline_mutations_keep_local_state(offline):
    offline.login("Asha", "asha@example.com")
    offline.add_to_cart(2)
    offline.add_to_cart(3)
    assert [it["quantity"] for it in offline.update_quantity(2, 2)] == [3, 1]
    assert [it["productId"] for it in offline.remove_from_cart(3)] == [2]
    assert offline.sync_cart() == offline.cart
    assert offline.checkout()["subtotal"] == 799 * 3
    assert offline.cart == []


def test_remove_from_cart_resyncs_with_server(shopper, store):
    user = shopper.login("Asha", "asha@example.com")
    shopper.add_to_cart(1)
    # another device added a line the local mirror has not seen yet
    store.add(user["id"], 10)
    cart = shopper.remove_from_cart(1)
    assert [it["productId"] for it in cart] == [10]
    assert shopper.cart == cart
