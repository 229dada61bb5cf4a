# bookstore/data/seed.py
from decimal import Decimal

from sqlalchemy import select

import bookstore.data.models  # noqa: F401
from bookstore.data.database import Base, SessionLocal, engine, transaction
from bookstore.data.models.book import BookAuthorModel, BookCategoryModel, BookModel
from bookstore.data.models.user import UserModel
from bookstore.domain.enums import BookFormat, UserRole
from bookstore.repos.book_repo import BookRepo
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_USERS = [
    {"email": "admin@example.com", "name": "Admin", "role": UserRole.ADMIN},
    {"email": "reader@example.com", "name": "Reader", "role": UserRole.CUSTOMER},
]

DEMO_BOOKS = [
    {
        "title": "Clean Code",
        "isbn13": "9780132350884",
        "price": Decimal("33000"),
        "stock": 25,
        "format": BookFormat.PAPERBACK,
        "publisher": "Prentice Hall",
        "authors": ["Robert C. Martin"],
        "categories": ["programming"],
    },
    {
        "title": "Designing Data-Intensive Applications",
        "isbn13": "9781449373320",
        "price": Decimal("45000"),
        "stock": 10,
        "format": BookFormat.PAPERBACK,
        "publisher": "O'Reilly",
        "authors": ["Martin Kleppmann"],
        "categories": ["programming", "databases"],
    },
    {
        "title": "The Pragmatic Programmer",
        "isbn13": "9780135957059",
        "price": Decimal("38000"),
        "stock": 0,
        "format": BookFormat.HARDCOVER,
        "publisher": "Addison-Wesley",
        "authors": ["David Thomas", "Andrew Hunt"],
        "categories": ["programming"],
    },
]


def seed() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # tylko pusta baza
        if db.execute(select(BookModel.id).limit(1)).first():
            logger.info("Catalog already present, skipping seed")
            return

        repo = BookRepo(db)
        with transaction(db):
            for data in DEMO_USERS:
                db.add(UserModel(**data))

            for data in DEMO_BOOKS:
                data = dict(data)
                authors = data.pop("authors")
                categories = data.pop("categories")
                book = repo.add_book(BookModel(**data))
                for order, name in enumerate(authors, start=1):
                    book.authors.append(
                        BookAuthorModel(author=repo.get_or_create_author(name), author_order=order)
                    )
                for slug in categories:
                    book.categories.append(BookCategoryModel(category=repo.get_or_create_category(slug)))

        logger.info(f"Seeded {len(DEMO_USERS)} users and {len(DEMO_BOOKS)} books")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
