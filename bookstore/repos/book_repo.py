# bookstore/repos/book_repo.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookstore.data.models.book import (
    AuthorModel,
    BookAuthorModel,
    BookCategoryModel,
    BookModel,
    CategoryModel,
)
from bookstore.utils.paging import Sort


@dataclass(frozen=True)
class BookFilter:
    keyword: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    category_id: int | None = None
    author_id: int | None = None
    include_deleted: bool = False


# camelCase z query -> kolumna
SORT_COLUMNS = {
    "id": BookModel.id,
    "title": BookModel.title,
    "price": BookModel.price,
    "stock": BookModel.stock,
    "avgRating": BookModel.avg_rating,
    "reviewCount": BookModel.review_count,
    "createdAt": BookModel.created_at,
    "updatedAt": BookModel.updated_at,
}


class BookRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_book(self, book_id: int) -> BookModel | None:
        return self.db.get(BookModel, book_id)

    def get_live_book(self, book_id: int) -> BookModel | None:
        return self.db.execute(
            BookModel.live().where(BookModel.id == book_id)
        ).scalar_one_or_none()

    def lock_books(self, book_ids: Iterable[int]) -> dict[int, BookModel]:
        """SELECT ... FOR UPDATE w stalej kolejnosci id."""
        rows = self.db.execute(
            select(BookModel)
            .where(BookModel.id.in_(list(book_ids)))
            .order_by(BookModel.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalars().all()
        return {b.id: b for b in rows}

    def get_by_isbn(self, isbn13: str) -> BookModel | None:
        return self.db.execute(
            select(BookModel).where(BookModel.isbn13 == isbn13)
        ).scalar_one_or_none()

    def _filtered(self, f: BookFilter):
        stmt = select(BookModel) if f.include_deleted else BookModel.live()
        if f.keyword:
            stmt = stmt.where(func.lower(BookModel.title).contains(f.keyword.lower(), autoescape=True))
        if f.min_price is not None:
            stmt = stmt.where(BookModel.price >= f.min_price)
        if f.max_price is not None:
            stmt = stmt.where(BookModel.price <= f.max_price)
        if f.category_id is not None:
            stmt = stmt.where(
                BookModel.id.in_(
                    select(BookCategoryModel.book_id).where(BookCategoryModel.category_id == f.category_id)
                )
            )
        if f.author_id is not None:
            stmt = stmt.where(
                BookModel.id.in_(
                    select(BookAuthorModel.book_id).where(BookAuthorModel.author_id == f.author_id)
                )
            )
        return stmt

    def count_books(self, f: BookFilter) -> int:
        return self.db.execute(
            select(func.count()).select_from(self._filtered(f).subquery())
        ).scalar_one()

    def list_books(self, f: BookFilter, sort: Sort, offset: int, limit: int) -> List[BookModel]:
        column = SORT_COLUMNS[sort.field]
        order = column.desc() if sort.descending else column.asc()
        stmt = self._filtered(f).order_by(order, BookModel.id.desc()).offset(offset).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def add_book(self, book: BookModel) -> BookModel:
        self.db.add(book)
        self.db.flush()
        return book

    def get_or_create_author(self, name: str) -> AuthorModel:
        author = self.db.execute(
            select(AuthorModel).where(AuthorModel.name == name)
        ).scalar_one_or_none()
        if author is None:
            author = AuthorModel(name=name)
            self.db.add(author)
            self.db.flush()
        return author

    def get_or_create_category(self, slug: str) -> CategoryModel:
        category = self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()
        if category is None:
            category = CategoryModel(slug=slug, name=slug)
            self.db.add(category)
            self.db.flush()
        return category
