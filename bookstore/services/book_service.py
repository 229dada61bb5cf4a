# bookstore/services/book_service.py
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookstore.data.database import transaction
from bookstore.data.models.book import BookAuthorModel, BookCategoryModel, BookModel
from bookstore.domain.errors import DuplicateResourceError, NotFoundError
from bookstore.domain.schemas import BookIn, BookUpdateIn
from bookstore.repos.book_repo import SORT_COLUMNS, BookFilter, BookRepo
from bookstore.utils.logging import get_logger
from bookstore.utils.paging import PageRequest, page_payload, parse_sort
from bookstore.utils.settings import DEFAULT_CURRENCY

logger = get_logger(__name__)

# pola kopiowane 1:1 z payloadu na model
SCALAR_FIELDS = (
    "title",
    "price",
    "stock",
    "isbn13",
    "description",
    "cover_url",
    "format",
    "language",
    "publisher",
    "publication_date",
    "currency",
)


def book_detail(book: BookModel) -> Dict[str, Any]:
    """Ksiazka z autorami w kolejnosci author_order i kategoriami."""
    detail = {c.name: getattr(book, c.name) for c in BookModel.__table__.columns}
    detail["authors"] = [
        {
            "id": link.author.id,
            "name": link.author.name,
            "bio": link.author.bio,
            "order": link.author_order,
        }
        for link in book.authors
    ]
    detail["categories"] = [link.category for link in book.categories]
    return detail


class BookService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = BookRepo(db)

    def list_books(self, f: BookFilter, request: PageRequest) -> Dict[str, Any]:
        sort = parse_sort(request.sort, tuple(SORT_COLUMNS), "createdAt")
        total = self.repo.count_books(f)
        books = self.repo.list_books(f, sort, request.offset, request.size)
        return page_payload(books, request, total, sort)

    def get_book(self, book_id: int) -> Dict[str, Any]:
        book = self.repo.get_live_book(book_id)
        if not book:
            raise NotFoundError("Book not found", {"bookId": book_id})
        return book_detail(book)

    # --- admin ---
    def _link_authors(self, book: BookModel, names: List[str]) -> None:
        book.authors.clear()
        self.db.flush()
        seen = set()
        for name in (n.strip() for n in names):
            if not name or name in seen:
                continue
            seen.add(name)
            author = self.repo.get_or_create_author(name)
            book.authors.append(BookAuthorModel(author=author, author_order=len(seen)))

    def _link_categories(self, book: BookModel, slugs: List[str]) -> None:
        book.categories.clear()
        self.db.flush()
        seen = set()
        for slug in (s.strip() for s in slugs):
            if not slug or slug in seen:
                continue
            seen.add(slug)
            category = self.repo.get_or_create_category(slug)
            book.categories.append(BookCategoryModel(category=category))

    def _check_isbn(self, isbn13: str | None, book_id: int | None = None) -> None:
        if not isbn13:
            return
        existing = self.repo.get_by_isbn(isbn13)
        if existing and existing.id != book_id:
            raise DuplicateResourceError("Book with this ISBN already exists", {"isbn13": isbn13})

    def create_book(self, payload: BookIn) -> BookModel:
        try:
            with transaction(self.db):
                self._check_isbn(payload.isbn13)

                data = payload.model_dump(include=set(SCALAR_FIELDS))
                data["currency"] = data.get("currency") or DEFAULT_CURRENCY
                book = self.repo.add_book(BookModel(**data))

                self._link_authors(book, payload.authors)
                self._link_categories(book, payload.categories)
                self.db.flush()
        except IntegrityError:
            raise DuplicateResourceError("Book with this ISBN already exists", {"isbn13": payload.isbn13})

        logger.info(f"Book {book.id} created: {book.title}")
        return book

    def update_book(self, book_id: int, payload: BookUpdateIn) -> BookModel:
        changes = payload.model_dump(include=set(SCALAR_FIELDS), exclude_unset=True)

        try:
            with transaction(self.db):
                book = self.repo.get_live_book(book_id)
                if not book:
                    raise NotFoundError("Book not found", {"bookId": book_id})

                if changes.get("isbn13"):
                    self._check_isbn(changes["isbn13"], book_id)

                for field, value in changes.items():
                    if value is None and field in ("title", "price", "stock", "format", "currency"):
                        continue
                    setattr(book, field, value)

                if payload.authors is not None:
                    self._link_authors(book, payload.authors)
                if payload.categories is not None:
                    self._link_categories(book, payload.categories)
                self.db.flush()
        except IntegrityError:
            raise DuplicateResourceError("Book with this ISBN already exists", {"isbn13": changes.get("isbn13")})

        logger.info(f"Book {book_id} updated: {sorted(changes)}")
        return book

    def delete_book(self, book_id: int) -> BookModel:
        with transaction(self.db):
            book = self.repo.get_book(book_id)
            if not book:
                raise NotFoundError("Book not found", {"bookId": book_id})

            if book.is_deleted:
                logger.debug(f"Book {book_id} already deleted")
                return book

            book.mark_deleted()

        logger.info(f"Book {book_id} soft-deleted")
        return book
