# loopcart/core.py
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import CartLineItem

# Request / response bodies of the JSON API. Field names follow the
# camelCase the storefront frontend sends.


def coerce_product_id(v: Any) -> Optional[Union[int, str]]:
    """Numeric values become ints; anything else stays a (never matching) string."""
    if v is None:
        return None
    if isinstance(v, bool):
        return str(v)
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v) if v.is_integer() else str(v)
    text = str(v).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return str(v)
    return int(number) if number.is_integer() else str(v)


class ClearCartIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(default="", alias="userId")

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id_as_key(cls, v: Any) -> str:
        # any value is just a mapping key; absent ids share the "" cart
        if v is None:
            return ""
        return str(v)


class RemoveFromCartIn(ClearCartIn):
    # missing ids never match a product: 404 on add, no-op on remove
    product_id: Optional[Union[int, str]] = Field(default=None, alias="productId")

    @field_validator("product_id", mode="before")
    @classmethod
    def _product_id(cls, v: Any) -> Optional[Union[int, str]]:
        return coerce_product_id(v)


class AddToCartIn(RemoveFromCartIn):
    quantity: int = 1


class CartOut(BaseModel):
    success: bool = True
    cart: List[CartLineItem]


class HealthOut(BaseModel):
    status: str
    message: str
    timestamp: str
