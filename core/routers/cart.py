"""
Cart Router

Four operations, each answering with the cart's stable id and current items.
Errors raised by the orchestrator are mapped to status codes by the
exception handlers registered in api/index.py.
"""
from fastapi import APIRouter, Depends, Path

from core.auth import verify_api_key
from core.cart import CartOrchestrator
from .deps import get_cart_orchestrator
from .models import AddItemRequest, CartResponse

router = APIRouter(prefix="/cart", tags=["cart"], dependencies=[Depends(verify_api_key)])


@router.post("", response_model=CartResponse)
async def create_cart(orchestrator: CartOrchestrator = Depends(get_cart_orchestrator)):
    """Create a new empty cart."""
    cart = await orchestrator.create_cart()
    return CartResponse.from_cart(cart)


@router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(
    cart_id: str = Path(..., min_length=1),
    orchestrator: CartOrchestrator = Depends(get_cart_orchestrator),
):
    """Get cart contents, recovering an expired session if needed."""
    cart = await orchestrator.get_cart(cart_id)
    return CartResponse.from_cart(cart)


@router.post("/{cart_id}/items", response_model=CartResponse)
async def add_item(
    request: AddItemRequest,
    cart_id: str = Path(..., min_length=1),
    orchestrator: CartOrchestrator = Depends(get_cart_orchestrator),
):
    """Add an item; an existing sku has its quantity increased."""
    cart = await orchestrator.add_item(cart_id, request.to_cart_item())
    return CartResponse.from_cart(cart)


@router.delete("/{cart_id}/items/{sku}", response_model=CartResponse)
async def remove_item(
    cart_id: str = Path(..., min_length=1),
    sku: str = Path(..., min_length=1),
    orchestrator: CartOrchestrator = Depends(get_cart_orchestrator),
):
    """Remove a sku from the cart."""
    cart = await orchestrator.remove_item(cart_id, sku)
    return CartResponse.from_cart(cart)
