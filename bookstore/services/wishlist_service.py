# bookstore/services/wishlist_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from bookstore.data.database import transaction
from bookstore.data.models.wishlist import WishlistItemModel
from bookstore.domain.errors import NotFoundError
from bookstore.repos.book_repo import BookRepo
from bookstore.repos.wishlist_repo import WishlistRepo
from bookstore.utils.logging import get_logger
from bookstore.utils.paging import PageRequest, page_payload, parse_sort

logger = get_logger(__name__)


class WishlistService:
    """Lista zyczen: dodanie i usuniecie sa idempotentne."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WishlistRepo(db)
        self.books = BookRepo(db)

    def add(self, user_id: int, book_id: int) -> Dict[str, Any]:
        with transaction(self.db):
            if not self.books.get_live_book(book_id):
                raise NotFoundError("Book not found", {"bookId": book_id})

            if self.repo.get_item(user_id, book_id):
                logger.debug(f"Book {book_id} already on wishlist of user {user_id}")
            else:
                self.repo.add_item(WishlistItemModel(user_id=user_id, book_id=book_id))
                logger.info(f"Book {book_id} added to wishlist of user {user_id}")

        return {"book_id": book_id}

    def remove(self, user_id: int, book_id: int) -> Dict[str, Any]:
        with transaction(self.db):
            removed = self.repo.delete_item(user_id, book_id)

        if removed:
            logger.info(f"Book {book_id} removed from wishlist of user {user_id}")
        return {"book_id": book_id}

    def list(self, user_id: int, request: PageRequest) -> Dict[str, Any]:
        sort = parse_sort(request.sort, ("createdAt",), "createdAt")
        total = self.repo.count_items(user_id)
        items = self.repo.list_items(user_id, sort.descending, request.offset, request.size)
        return page_payload(
            [{"book_id": w.book_id, "added_at": w.created_at, "book": w.book} for w in items],
            request,
            total,
            sort,
        )
