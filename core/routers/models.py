"""
Cart API Pydantic Models

Request shapes for the cart routes. Shape checks happen here; the
orchestrator re-validates business rules before touching any store.
"""
from pydantic import BaseModel, ConfigDict, Field, StrictInt

from core.cart import CartItem, ExperienceCart


class AddItemRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sku: str = Field(..., min_length=1, description="Stock keeping unit")
    quantity: StrictInt = Field(..., gt=0, description="Units to add")

    def to_cart_item(self) -> CartItem:
        return CartItem(sku=self.sku, quantity=self.quantity)


class CartItemResponse(BaseModel):
    sku: str
    quantity: int


class CartResponse(BaseModel):
    cart_id: str
    items: list[CartItemResponse]

    @classmethod
    def from_cart(cls, cart: ExperienceCart) -> "CartResponse":
        return cls(**cart.to_dict())
