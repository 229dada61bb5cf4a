# bookstore/api/routers/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookstore.api.deps import CurrentUser, get_current_user, page_params
from bookstore.data.database import get_db
from bookstore.domain.schemas import (
    ApiResponse,
    CartItemIn,
    CartItemUpdateIn,
    CartLineOut,
    CartRemovedOut,
    CartView,
    ok,
)
from bookstore.services.cart_service import CartService
from bookstore.utils.paging import PageRequest

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=ApiResponse[CartView])
def get_cart(
    request: PageRequest = Depends(page_params),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Aktywny koszyk uzytkownika (tworzony przy pierwszym odczycie).
    `summary.subtotal` obejmuje tylko biezaca strone.
    """
    svc = get_service(db)
    view = svc.list_cart(user.id, request)
    return ok(CartView.model_validate(view, from_attributes=True))


@router.post("/items", response_model=ApiResponse[CartLineOut], status_code=201)
def add_item(
    payload: CartItemIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    item = svc.add_item(user.id, payload.book_id, payload.quantity)
    return ok(CartLineOut.model_validate(item), "Added to cart")


@router.patch("/items/{book_id}", response_model=ApiResponse[CartLineOut])
def update_item(
    book_id: int,
    payload: CartItemUpdateIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    item = svc.update_item(user.id, book_id, payload.quantity)
    return ok(CartLineOut.model_validate(item), "Cart item updated")


@router.delete("/items/{book_id}", response_model=ApiResponse[CartRemovedOut])
def remove_item(
    book_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(CartRemovedOut.model_validate(svc.remove_item(user.id, book_id)), "Removed from cart")
