# bookstore/repos/cart_repo.py
from decimal import Decimal
from typing import List

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session, joinedload

from bookstore.data.database import utcnow
from bookstore.data.models.book import BookModel
from bookstore.data.models.cart import CartModel
from bookstore.data.models.cart_item import CartItemModel
from bookstore.domain.enums import CartStatus


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_active_cart(self, user_id: int, for_update: bool = False) -> CartModel | None:
        stmt = select(CartModel).where(
            CartModel.user_id == user_id,
            CartModel.status == CartStatus.ACTIVE,
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def claim_active_cart(self, user_id: int) -> CartModel | None:
        """
        ACTIVE koszyk zablokowany do konca transakcji albo None.

        Warunkowy UPDATE trzyma wiersz takze tam, gdzie FOR UPDATE jest
        ignorowane (sqlite), i odrzuca koszyk zamkniety w miedzyczasie.
        """
        cart = self.get_active_cart(user_id, for_update=True)
        if cart is None:
            return None
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart.id, CartModel.status == CartStatus.ACTIVE)
            .values(updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return cart if result.rowcount else None

    def count_active_carts(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(CartModel).where(
                CartModel.user_id == user_id,
                CartModel.status == CartStatus.ACTIVE,
            )
        ).scalar_one()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_item(self, cart_id: int, book_id: int, for_update: bool = False) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.cart_id == cart_id,
            CartItemModel.book_id == book_id,
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, cart_id: int, book_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.book_id == book_id,
            )
        )
        return result.rowcount

    def _live_items(self, cart_id: int):
        return (
            select(CartItemModel)
            .join(BookModel, BookModel.id == CartItemModel.book_id)
            .where(CartItemModel.cart_id == cart_id, BookModel.is_live())
        )

    def count_live_items(self, cart_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(self._live_items(cart_id).subquery())
        ).scalar_one()

    def list_live_items(self, cart_id: int, offset: int, limit: int) -> List[CartItemModel]:
        stmt = (
            self._live_items(cart_id)
            .options(joinedload(CartItemModel.book))
            .order_by(CartItemModel.created_at.desc(), CartItemModel.book_id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def live_total(self, cart_id: int) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(CartItemModel.unit_price * CartItemModel.quantity), 0))
            .select_from(CartItemModel)
            .join(BookModel, BookModel.id == CartItemModel.book_id)
            .where(CartItemModel.cart_id == cart_id, BookModel.is_live())
        ).scalar_one()
        return Decimal(str(total))

    def get_cart_items(self, cart_id: int) -> List[CartItemModel]:
        """Wszystkie pozycje koszyka, takze z usunietymi ksiazkami (checkout je odrzuca)."""
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.book_id)
            ).scalars().all()
        )
