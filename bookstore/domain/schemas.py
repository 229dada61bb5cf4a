# bookstore/domain/schemas.py
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bookstore.domain.enums import (
    BookFormat,
    CartStatus,
    OrderStatus,
    PaymentStatus,
    UserRole,
)

T = TypeVar("T")


class CamelModel(BaseModel):
    """Baza dla wszystkich schematow: JSON w camelCase, atrybuty w snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =====================================================
# ENVELOPE
# =====================================================
class ApiResponse(CamelModel, Generic[T]):
    is_success: bool = True
    message: str
    payload: Optional[T] = None


class ErrorResponse(CamelModel):
    timestamp: datetime
    path: str
    status: int
    code: str
    message: str
    details: Optional[Any] = None


class Page(CamelModel, Generic[T]):
    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
    sort: Optional[str] = None


def ok(payload=None, message: str = "OK") -> ApiResponse:
    return ApiResponse(is_success=True, message=message, payload=payload)


# =====================================================
# USERS
# =====================================================
class UserRef(CamelModel):
    id: int
    name: str


class UserOut(CamelModel):
    id: int
    email: str
    name: str
    phone: Optional[str] = None
    role: UserRole
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


class UserUpdateIn(CamelModel):
    name: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = Field(None, max_length=20)


# =====================================================
# CATALOG
# =====================================================
class AuthorRef(CamelModel):
    id: int
    name: str
    bio: Optional[str] = None
    order: int


class CategoryRef(CamelModel):
    id: int
    name: str
    slug: str


class BookRef(CamelModel):
    id: int
    title: str


class BookSummaryOut(CamelModel):
    id: int
    title: str
    price: Decimal
    currency: str
    stock: int
    avg_rating: Decimal
    review_count: int
    cover_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


class BookDetailOut(BookSummaryOut):
    description: Optional[str] = None
    isbn13: Optional[str] = None
    publication_date: Optional[date] = None
    format: BookFormat
    language: Optional[str] = None
    publisher: Optional[str] = None
    authors: List[AuthorRef] = []
    categories: List[CategoryRef] = []


class BookIn(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    isbn13: Optional[str] = Field(None, max_length=13)
    description: Optional[str] = None
    cover_url: Optional[str] = None
    format: BookFormat = BookFormat.PAPERBACK
    language: Optional[str] = None
    publisher: Optional[str] = None
    publication_date: Optional[date] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    authors: List[str] = []
    categories: List[str] = []


class BookUpdateIn(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    isbn13: Optional[str] = Field(None, max_length=13)
    description: Optional[str] = None
    cover_url: Optional[str] = None
    format: Optional[BookFormat] = None
    language: Optional[str] = None
    publisher: Optional[str] = None
    publication_date: Optional[date] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    # lista podana -> zastepuje wszystkie powiazania
    authors: Optional[List[str]] = None
    categories: Optional[List[str]] = None


class BookChangeOut(CamelModel):
    book_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


# =====================================================
# CART
# =====================================================
class CartItemIn(CamelModel):
    book_id: int = Field(..., gt=0)
    quantity: int


class CartItemUpdateIn(CamelModel):
    quantity: int


class CartLineOut(CamelModel):
    cart_id: int
    book_id: int
    quantity: int
    unit_price: Decimal
    updated_at: datetime


class CartRemovedOut(CamelModel):
    cart_id: int
    book_id: int


class CartBookOut(CamelModel):
    id: int
    title: str
    price: Decimal
    currency: str
    cover_url: Optional[str] = None
    stock: int


class CartEntryOut(CamelModel):
    book_id: int
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    added_at: datetime
    updated_at: datetime
    book: CartBookOut


class CartHeaderOut(CamelModel):
    id: int
    status: CartStatus
    created_at: datetime


class CartSummaryOut(CamelModel):
    # suma tylko z biezacej strony
    subtotal: Decimal
    cart_total: Decimal
    currency: str


class CartView(Page[CartEntryOut]):
    cart: CartHeaderOut
    summary: CartSummaryOut


# =====================================================
# ORDERS
# =====================================================
class CheckoutOut(CamelModel):
    order_id: int
    created_at: datetime


class OrderSummaryOut(CamelModel):
    id: int
    status: OrderStatus
    payment_status: PaymentStatus
    total_amount: Decimal
    placed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class OrderLineOut(CamelModel):
    book_id: int
    book_title: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderDetailOut(OrderSummaryOut):
    items: List[OrderLineOut]


# =====================================================
# REVIEWS
# =====================================================
class ReviewIn(CamelModel):
    rating: int
    title: Optional[str] = None
    content: str


class ReviewUpdateIn(CamelModel):
    rating: Optional[int] = None
    title: Optional[str] = None
    content: Optional[str] = None


class ReviewOut(CamelModel):
    id: int
    rating: int
    title: Optional[str] = None
    content: str
    like_count: int
    comment_count: int
    created_at: datetime
    updated_at: datetime
    user: UserRef
    book: Optional[BookRef] = None


class BookReviewsOut(Page[ReviewOut]):
    book: BookRef


class ReviewChangeOut(CamelModel):
    review_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


class TopReviewsOut(CamelModel):
    limit: int
    sort: str
    items: List[ReviewOut]


# =====================================================
# COMMENTS
# =====================================================
class CommentIn(CamelModel):
    content: str
    parent_id: Optional[int] = None


class CommentUpdateIn(CamelModel):
    content: str


class CommentOut(CamelModel):
    id: int
    review_id: int
    parent_id: Optional[int] = None
    content: str
    like_count: int
    created_at: datetime
    updated_at: datetime
    user: UserRef


class CommentChangeOut(CamelModel):
    comment_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


# =====================================================
# WISHLIST
# =====================================================
class WishlistBookOut(CamelModel):
    id: int
    title: str
    price: Decimal
    currency: str
    cover_url: Optional[str] = None
    avg_rating: Decimal
    review_count: int


class WishlistEntryOut(CamelModel):
    book_id: int
    added_at: datetime
    book: WishlistBookOut


class WishlistChangeOut(CamelModel):
    book_id: int


# =====================================================
# STATS
# =====================================================
class TopBookOut(CamelModel):
    id: int
    title: str
    price: Decimal
    avg_rating: Decimal
    review_count: int
    created_at: datetime


class TopBooksOut(CamelModel):
    metric: str
    limit: int
    items: List[TopBookOut]


class DayCount(CamelModel):
    day: str
    count: int


class DailyStatsOut(CamelModel):
    days: int
    since: datetime
    orders: List[DayCount]
    reviews: List[DayCount]
