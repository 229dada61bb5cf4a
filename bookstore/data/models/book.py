from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from bookstore.data.database import Base, utcnow
from bookstore.data.soft_delete import SoftDeleteMixin
from bookstore.domain.enums import BookFormat
from bookstore.utils.settings import DEFAULT_CURRENCY


class BookModel(SoftDeleteMixin, Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False, index=True)
    isbn13 = Column(String(13), nullable=True, unique=True)
    description = Column(Text, nullable=True)

    price = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    stock = Column(Integer, nullable=False, default=0)

    publication_date = Column(Date, nullable=True)
    cover_url = Column(String(500), nullable=True)
    format = Column(Enum(BookFormat, native_enum=False, length=20), nullable=False, default=BookFormat.PAPERBACK)
    language = Column(String(32), nullable=True)
    publisher = Column(String(191), nullable=True)

    # agregaty z nieusunietych recenzji, przeliczane w transakcji recenzji
    avg_rating = Column(Numeric(3, 2), nullable=False, default=0, index=True)
    review_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    authors = relationship(
        "BookAuthorModel",
        back_populates="book",
        cascade="all, delete-orphan",
        order_by="BookAuthorModel.author_order",
    )
    categories = relationship(
        "BookCategoryModel",
        back_populates="book",
        cascade="all, delete-orphan",
    )


class AuthorModel(Base):
    __tablename__ = "authors"

    id = Column(Integer, primary_key=True)
    name = Column(String(191), nullable=False, unique=True)
    bio = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(191), nullable=False, unique=True)
    slug = Column(String(191), nullable=False, unique=True)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class BookAuthorModel(Base):
    __tablename__ = "book_authors"

    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    author_id = Column(Integer, ForeignKey("authors.id", ondelete="RESTRICT"), primary_key=True, index=True)
    author_order = Column(Integer, nullable=False, default=1)

    book = relationship("BookModel", back_populates="authors")
    author = relationship("AuthorModel")


class BookCategoryModel(Base):
    __tablename__ = "book_categories"

    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), primary_key=True, index=True)

    book = relationship("BookModel", back_populates="categories")
    category = relationship("CategoryModel")
