# bookstore/api/routers/books.py
from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookstore.api.deps import CurrentUser, get_current_admin, page_params
from bookstore.data.database import get_db
from bookstore.domain.schemas import (
    ApiResponse,
    BookChangeOut,
    BookDetailOut,
    BookIn,
    BookSummaryOut,
    BookUpdateIn,
    Page,
    ok,
)
from bookstore.repos.book_repo import BookFilter
from bookstore.services.book_service import BookService
from bookstore.utils.paging import PageRequest

router = APIRouter(prefix="/books", tags=["books"])


def get_service(db: Session):
    return BookService(db)


def _change(book) -> BookChangeOut:
    return BookChangeOut(
        book_id=book.id,
        created_at=book.created_at,
        updated_at=book.updated_at,
        deleted_at=book.deleted_at,
    )


@router.get("", response_model=ApiResponse[Page[BookSummaryOut]])
def list_books(
    keyword: str | None = Query(None),
    min_price: Decimal | None = Query(None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(None, alias="maxPrice", ge=0),
    category_id: int | None = Query(None, alias="categoryId"),
    author_id: int | None = Query(None, alias="authorId"),
    include_deleted: bool = Query(False, alias="includeDeleted"),
    request: PageRequest = Depends(page_params),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    f = BookFilter(
        keyword=keyword,
        min_price=min_price,
        max_price=max_price,
        category_id=category_id,
        author_id=author_id,
        include_deleted=include_deleted,
    )
    return ok(Page[BookSummaryOut].model_validate(svc.list_books(f, request), from_attributes=True))


@router.get("/{book_id}", response_model=ApiResponse[BookDetailOut])
def get_book(book_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    return ok(BookDetailOut.model_validate(svc.get_book(book_id), from_attributes=True))


@router.post("", response_model=ApiResponse[BookChangeOut], status_code=201)
def create_book(
    payload: BookIn,
    admin: CurrentUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(_change(svc.create_book(payload)), "Book created")


@router.patch("/{book_id}", response_model=ApiResponse[BookChangeOut])
def update_book(
    book_id: int,
    payload: BookUpdateIn,
    admin: CurrentUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(_change(svc.update_book(book_id, payload)), "Book updated")


@router.delete("/{book_id}", response_model=ApiResponse[BookChangeOut])
def delete_book(
    book_id: int,
    admin: CurrentUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(_change(svc.delete_book(book_id)), "Book deleted")
