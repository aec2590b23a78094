# loopcart/models.py
from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(gt=0)
    name: str
    price: int = Field(ge=0)
    category: str
    image: str
    description: str
    discount: int = Field(default=0, ge=0, le=100)
    in_stock: bool = Field(default=True, alias="inStock")

    @property
    def image_is_url(self) -> bool:
        # anything else is rendered as an emoji glyph
        return self.image.startswith("http")


class CartLineItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(alias="productId")
    quantity: int
    name: str
    price: int
    image: str
    discount: int = 0
    category: str = ""

    @classmethod
    def from_product(cls, product: Product, quantity: int) -> "CartLineItem":
        return cls(
            product_id=product.id,
            quantity=quantity,
            name=product.name,
            price=product.price,
            image=product.image,
            discount=product.discount,
            category=product.category,
        )
