#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w Base.metadata

from bookstore.data.models.user import UserModel, RefreshTokenModel
from bookstore.data.models.book import (
    BookModel,
    AuthorModel,
    CategoryModel,
    BookAuthorModel,
    BookCategoryModel,
)
from bookstore.data.models.review import ReviewModel, ReviewLikeModel
from bookstore.data.models.comment import CommentModel, CommentLikeModel
from bookstore.data.models.wishlist import WishlistItemModel
from bookstore.data.models.cart import CartModel
from bookstore.data.models.cart_item import CartItemModel
from bookstore.data.models.order import OrderModel
from bookstore.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "RefreshTokenModel",
    "BookModel",
    "AuthorModel",
    "CategoryModel",
    "BookAuthorModel",
    "BookCategoryModel",
    "ReviewModel",
    "ReviewLikeModel",
    "CommentModel",
    "CommentLikeModel",
    "WishlistItemModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
]
