# loopcart_sdk/__init__.py
from .client import StoreClient
from .shopper import Shopper
from .storage import LocalStorage

__all__ = ["StoreClient", "Shopper", "LocalStorage"]
