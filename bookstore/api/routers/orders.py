# bookstore/api/routers/orders.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookstore.api.deps import CurrentUser, get_current_user, page_params
from bookstore.data.database import get_db
from bookstore.domain.schemas import (
    ApiResponse,
    CheckoutOut,
    OrderDetailOut,
    OrderSummaryOut,
    Page,
    ok,
)
from bookstore.services.order_service import OrderService
from bookstore.utils.paging import PageRequest

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=ApiResponse[CheckoutOut], status_code=201)
def create_order(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Skladanie zamowienia z aktywnego koszyka.
    Cala operacja w jednej transakcji; koszyk przechodzi w CHECKED_OUT.
    """
    svc = get_service(db)
    return ok(CheckoutOut.model_validate(svc.create_order_from_cart(user.id)), "Order placed")


@router.get("", response_model=ApiResponse[Page[OrderSummaryOut]])
def list_orders(
    request: PageRequest = Depends(page_params),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(Page[OrderSummaryOut].model_validate(svc.list_orders(user.id, request), from_attributes=True))


@router.get("/{order_id}", response_model=ApiResponse[OrderDetailOut])
def get_order(
    order_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(OrderDetailOut.model_validate(svc.get_order(user.id, order_id)))
