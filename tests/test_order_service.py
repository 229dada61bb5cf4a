"""
Tests for checkout: cart -> order in one transaction.
"""
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from bookstore.data.models.order import OrderModel
from bookstore.domain.enums import CartStatus, OrderStatus, PaymentStatus
from bookstore.domain.errors import NotFoundError, UnprocessableError
from bookstore.services.cart_service import CartService
from bookstore.services.order_service import OrderService
from bookstore.utils.paging import PageRequest


def _order_count(db) -> int:
    return db.execute(select(func.count()).select_from(OrderModel)).scalar_one()


class TestCheckout:
    def test_three_copies_at_ten_thousand(self, db, user, make_book):
        book = make_book(title="Refactoring", price="10000", stock=10)
        cart = CartService(db).get_or_create_active_cart(user.id)
        CartService(db).add_item(user.id, book.id, 3)

        result = OrderService(db).create_order_from_cart(user.id)

        order = OrderService(db).get_order(user.id, result["order_id"])
        assert order["total_amount"] == Decimal("30000")
        assert order["status"] == OrderStatus.PENDING
        assert order["payment_status"] == PaymentStatus.UNPAID
        assert order["placed_at"] is not None
        assert order["items"] == [
            {
                "book_id": book.id,
                "book_title": "Refactoring",
                "quantity": 3,
                "unit_price": Decimal("10000"),
                "line_total": Decimal("30000"),
            }
        ]

        db.refresh(book)
        db.refresh(cart)
        assert book.stock == 7
        assert cart.status == CartStatus.CHECKED_OUT

    def test_second_checkout_has_no_active_cart(self, db, user, make_book):
        book = make_book(stock=10)
        CartService(db).add_item(user.id, book.id, 1)
        svc = OrderService(db)
        svc.create_order_from_cart(user.id)

        with pytest.raises(NotFoundError):
            svc.create_order_from_cart(user.id)

        assert _order_count(db) == 1

    def test_next_add_opens_new_cart(self, db, user, make_book):
        book = make_book(stock=10)
        carts = CartService(db)
        first = carts.get_or_create_active_cart(user.id)
        carts.add_item(user.id, book.id, 1)
        OrderService(db).create_order_from_cart(user.id)

        carts.add_item(user.id, book.id, 1)

        assert carts.get_or_create_active_cart(user.id).id != first.id

    def test_no_cart(self, db, user):
        with pytest.raises(NotFoundError):
            OrderService(db).create_order_from_cart(user.id)

    def test_empty_cart(self, db, user):
        CartService(db).get_or_create_active_cart(user.id)
        with pytest.raises(UnprocessableError):
            OrderService(db).create_order_from_cart(user.id)

    def test_uses_price_captured_in_cart(self, db, user, make_book):
        book = make_book(price="10000", stock=10)
        CartService(db).add_item(user.id, book.id, 2)

        book.price = Decimal("99000")
        db.commit()
        result = OrderService(db).create_order_from_cart(user.id)

        assert OrderService(db).get_order(user.id, result["order_id"])["total_amount"] == Decimal("20000")

    def test_title_snapshot_survives_rename(self, db, user, make_book):
        book = make_book(title="Old title", stock=5)
        CartService(db).add_item(user.id, book.id, 1)
        result = OrderService(db).create_order_from_cart(user.id)

        book.title = "New title"
        db.commit()

        items = OrderService(db).get_order(user.id, result["order_id"])["items"]
        assert items[0]["book_title"] == "Old title"


class TestCheckoutAtomicity:
    def test_insufficient_stock_changes_nothing(self, db, user, make_book):
        plenty = make_book(title="Plenty", stock=10)
        scarce = make_book(title="Scarce", stock=5)
        carts = CartService(db)
        cart = carts.get_or_create_active_cart(user.id)
        carts.add_item(user.id, plenty.id, 2)
        carts.add_item(user.id, scarce.id, 4)

        # ktos inny wykupil wiekszosc
        scarce.stock = 1
        db.commit()

        with pytest.raises(UnprocessableError) as exc:
            OrderService(db).create_order_from_cart(user.id)
        assert exc.value.details["bookId"] == scarce.id

        db.refresh(plenty)
        db.refresh(scarce)
        db.refresh(cart)
        assert plenty.stock == 10
        assert scarce.stock == 1
        assert cart.status == CartStatus.ACTIVE
        assert _order_count(db) == 0

    def test_deleted_book_rejects_checkout(self, db, user, make_book):
        book = make_book(stock=5)
        CartService(db).add_item(user.id, book.id, 1)

        book.mark_deleted()
        db.commit()

        with pytest.raises(UnprocessableError):
            OrderService(db).create_order_from_cart(user.id)
        assert _order_count(db) == 0

    def test_stock_never_negative(self, db, make_user, make_book):
        book = make_book(stock=3)
        first, second = make_user(), make_user()
        CartService(db).add_item(first.id, book.id, 2)
        CartService(db).add_item(second.id, book.id, 2)

        OrderService(db).create_order_from_cart(first.id)
        with pytest.raises(UnprocessableError):
            OrderService(db).create_order_from_cart(second.id)

        db.refresh(book)
        assert book.stock == 1


class TestOrderQueries:
    def test_list_own_orders(self, db, make_user, make_book):
        book = make_book(stock=10)
        owner, other = make_user(), make_user()
        for _ in range(2):
            CartService(db).add_item(owner.id, book.id, 1)
            OrderService(db).create_order_from_cart(owner.id)
        CartService(db).add_item(other.id, book.id, 1)
        OrderService(db).create_order_from_cart(other.id)

        page = OrderService(db).list_orders(owner.id, PageRequest.of())

        assert page["total_elements"] == 2
        assert all(o.user_id == owner.id for o in page["content"])
        assert page["sort"] == "createdAt,DESC"

    def test_foreign_order_is_not_found(self, db, make_user, make_book):
        book = make_book(stock=10)
        owner, other = make_user(), make_user()
        CartService(db).add_item(owner.id, book.id, 1)
        result = OrderService(db).create_order_from_cart(owner.id)

        with pytest.raises(NotFoundError):
            OrderService(db).get_order(other.id, result["order_id"])
