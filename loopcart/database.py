# loopcart/database.py
import logging
import threading
from typing import Any, Dict, List

from .catalog import CatalogProvider
from .core import coerce_product_id
from .errors import NotFoundError
from .models import CartLineItem

logger = logging.getLogger(__name__)

# In-memory cart storage. Nothing here survives a restart.


class CartStore:
    """user id -> ordered cart line items (order of first add)."""

    def __init__(self, catalog: CatalogProvider):
        self.catalog = catalog
        self._carts: Dict[str, List[CartLineItem]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._carts)

    def users(self) -> List[str]:
        with self._lock:
            return list(self._carts)

    def _snapshot(self, user_id: str) -> List[CartLineItem]:
        return [item.model_copy() for item in self._carts.get(user_id, [])]

    def get(self, user_id: str) -> List[CartLineItem]:
        with self._lock:
            return self._snapshot(user_id)

    def add(self, user_id: str, product_id: Any, quantity: int = 1) -> List[CartLineItem]:
        product = self.catalog.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        with self._lock:
            cart = self._carts.setdefault(user_id, [])
            for item in cart:
                if item.product_id == product.id:
                    # negative deltas are applied as-is, no clamping at zero
                    item.quantity += quantity
                    break
            else:
                cart.append(CartLineItem.from_product(product, quantity))
            logger.info("cart add user=%r product=%s qty=%s lines=%d", user_id, product.id, quantity, len(cart))
            return self._snapshot(user_id)

    def remove(self, user_id: str, product_id: Any) -> List[CartLineItem]:
        product_id = coerce_product_id(product_id)
        with self._lock:
            cart = self._carts.get(user_id)
            if cart is not None:
                self._carts[user_id] = [item for item in cart if item.product_id != product_id]
                logger.info("cart remove user=%r product=%s", user_id, product_id)
            return self._snapshot(user_id)

    def clear(self, user_id: str) -> List[CartLineItem]:
        with self._lock:
            self._carts[user_id] = []
            logger.info("cart clear user=%r", user_id)
            return []

    def reset(self) -> None:
        with self._lock:
            self._carts.clear()
