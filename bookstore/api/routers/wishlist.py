# bookstore/api/routers/wishlist.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookstore.api.deps import CurrentUser, get_current_user, page_params
from bookstore.data.database import get_db
from bookstore.domain.schemas import ApiResponse, Page, WishlistChangeOut, WishlistEntryOut, ok
from bookstore.services.wishlist_service import WishlistService
from bookstore.utils.paging import PageRequest

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


def get_service(db: Session):
    return WishlistService(db)


@router.get("", response_model=ApiResponse[Page[WishlistEntryOut]])
def list_wishlist(
    request: PageRequest = Depends(page_params),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(Page[WishlistEntryOut].model_validate(svc.list(user.id, request), from_attributes=True))


@router.post("/{book_id}", response_model=ApiResponse[WishlistChangeOut])
def add_to_wishlist(
    book_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(WishlistChangeOut.model_validate(svc.add(user.id, book_id)), "Added to wishlist")


@router.delete("/{book_id}", response_model=ApiResponse[WishlistChangeOut])
def remove_from_wishlist(
    book_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(WishlistChangeOut.model_validate(svc.remove(user.id, book_id)), "Removed from wishlist")
