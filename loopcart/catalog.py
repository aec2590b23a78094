# loopcart/catalog.py
import logging
from typing import Any, Dict, Iterable, List, Optional

from .core import coerce_product_id
from .models import Product

logger = logging.getLogger(__name__)

# Demo catalog served by the storefront. Loaded once per process.
SEED_PRODUCTS: List[Dict[str, Any]] = [
    # Electronics
    {"id": 1, "name": "Samsung Galaxy M34", "price": 18999, "category": "Electronics", "image": "📱",
     "description": "6GB RAM, 128GB Storage, 6000mAh Battery", "discount": 15, "inStock": True},
    {"id": 2, "name": "Boat Rockerz 450", "price": 1499, "category": "Electronics", "image": "🎧",
     "description": "Wireless Bluetooth Headphones, 20hrs battery", "discount": 20, "inStock": True},
    {"id": 3, "name": "Dell Inspiron Laptop", "price": 54999, "category": "Electronics", "image": "💻",
     "description": "Intel i5, 8GB RAM, 512GB SSD, Windows 11", "discount": 10, "inStock": True},
    # Clothing
    {"id": 4, "name": "Men's Cotton T-Shirt", "price": 499, "category": "Clothing", "image": "👕",
     "description": "Premium cotton fabric, all sizes available", "discount": 25, "inStock": True},
    {"id": 5, "name": "Women's Kurti", "price": 899, "category": "Clothing", "image": "👚",
     "description": "Cotton silk blend, elegant design", "discount": 30, "inStock": True},
    {"id": 6, "name": "Jeans for Men", "price": 1299, "category": "Clothing", "image": "👖",
     "description": "Slim fit, stretchable denim, all sizes", "discount": 20, "inStock": True},
    # Books
    {"id": 7, "name": "Python Programming Book", "price": 699, "category": "Books", "image": "📚",
     "description": "Latest edition with practical examples and projects", "discount": 15, "inStock": True},
    {"id": 8, "name": "JavaScript Guide", "price": 599, "category": "Books", "image": "📖",
     "description": "Beginner to advanced concepts with examples", "discount": 10, "inStock": True},
    {"id": 9, "name": "Rich Dad Poor Dad", "price": 299, "category": "Books", "image": "💰",
     "description": "Financial education bestseller, life-changing", "discount": 25, "inStock": True},
    # Furniture
    {"id": 10, "name": "Wooden Study Table", "price": 4599, "category": "Furniture", "image": "🪑",
     "description": "Solid wood construction, easy assembly", "discount": 20, "inStock": True},
    {"id": 11, "name": "Office Chair", "price": 2999, "category": "Furniture", "image": "💺",
     "description": "Ergonomic design, comfortable seating", "discount": 15, "inStock": True},
    {"id": 12, "name": "Bookshelf", "price": 3599, "category": "Furniture", "image": "📚",
     "description": "4-shelf wooden bookshelf, sturdy design", "discount": 30, "inStock": True},
    # Second Hand
    {"id": 13, "name": "Used iPhone 12", "price": 34999, "category": "Second Hand", "image": "📱",
     "description": "Good condition, 6 months warranty, 128GB", "discount": 35, "inStock": True},
    {"id": 14, "name": "Used DSLR Camera", "price": 21999, "category": "Second Hand", "image": "📷",
     "description": "Canon EOS, 2 lenses included, excellent condition", "discount": 40, "inStock": True},
    {"id": 15, "name": "Used Gaming Console", "price": 18999, "category": "Second Hand", "image": "🎮",
     "description": "PlayStation 4 with 2 controllers, 500GB", "discount": 25, "inStock": True},
]


class CatalogProvider:
    """Read-only product list; order is load order."""

    def __init__(self, products: Optional[Iterable[Dict[str, Any]]] = None):
        rows = SEED_PRODUCTS if products is None else products
        self._products = tuple(Product.model_validate(row) for row in rows)
        self._by_id = {p.id: p for p in self._products}
        if len(self._by_id) != len(self._products):
            raise ValueError("product ids must be unique")

    def __len__(self) -> int:
        return len(self._products)

    def list_all(self) -> List[Product]:
        return list(self._products)

    def list_by_category(self, category: str) -> List[Product]:
        wanted = category.lower()
        return [p for p in self._products if p.category.lower() == wanted]

    def get(self, product_id: Any) -> Optional[Product]:
        pid = coerce_product_id(product_id)
        if not isinstance(pid, int):
            return None
        return self._by_id.get(pid)
