"""
Tests for the cart lifecycle: get-or-create, add / update / remove, listing.
"""
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bookstore.data.database import Base
from bookstore.data.models.book import BookModel
from bookstore.data.models.user import UserModel
from bookstore.domain.enums import UserRole
from bookstore.domain.errors import NotFoundError, UnprocessableError, ValidationFailedError
from bookstore.repos.book_repo import BookRepo
from bookstore.repos.cart_repo import CartRepo
from bookstore.services.cart_service import CartService
from bookstore.services.order_service import OrderService
from bookstore.utils.paging import PageRequest


class TestActiveCart:
    def test_created_on_first_use(self, db, user):
        svc = CartService(db)

        first = svc.get_or_create_active_cart(user.id)
        second = svc.get_or_create_active_cart(user.id)

        assert first.id == second.id
        assert CartRepo(db).count_active_carts(user.id) == 1

    def test_lost_creation_race_returns_winner(self, db, user):
        """Drugi tworca dostaje IntegrityError z indeksu i po ponowieniu czyta koszyk zwyciezcy."""
        winner = CartService(db).get_or_create_active_cart(user.id)

        svc = CartService(db)
        real_lookup = svc.repo.get_active_cart
        calls = []

        def stale_then_real(user_id, for_update=False):
            calls.append(user_id)
            return None if len(calls) == 1 else real_lookup(user_id, for_update)

        with patch.object(svc.repo, "get_active_cart", side_effect=stale_then_real):
            cart = svc.get_or_create_active_cart(user.id)

        assert cart.id == winner.id
        assert len(calls) == 2
        assert CartRepo(db).count_active_carts(user.id) == 1


class TestAddItem:
    def test_new_line_captures_price(self, db, user, make_book):
        book = make_book(price="12000", stock=5)

        item = CartService(db).add_item(user.id, book.id, 2)

        assert item.quantity == 2
        assert item.unit_price == Decimal("12000")

    def test_repeat_add_increments_and_keeps_price(self, db, user, make_book):
        book = make_book(price="12000", stock=5)
        svc = CartService(db)
        svc.add_item(user.id, book.id, 1)

        book.price = Decimal("15000")
        db.commit()
        item = svc.add_item(user.id, book.id, 2)

        assert item.quantity == 3
        assert item.unit_price == Decimal("12000")

    @pytest.mark.parametrize("quantity", [0, -1, 1000])
    def test_quantity_out_of_range(self, db, user, make_book, quantity):
        book = make_book()
        with pytest.raises(ValidationFailedError):
            CartService(db).add_item(user.id, book.id, quantity)

    def test_more_than_stock(self, db, user, make_book):
        book = make_book(stock=2)
        with pytest.raises(UnprocessableError) as exc:
            CartService(db).add_item(user.id, book.id, 3)
        assert exc.value.details == {"stock": 2, "requested": 3}

    def test_accumulated_quantity_checked_against_stock(self, db, user, make_book):
        book = make_book(stock=3)
        svc = CartService(db)
        svc.add_item(user.id, book.id, 2)

        with pytest.raises(UnprocessableError):
            svc.add_item(user.id, book.id, 2)

        assert svc.repo.get_cart_item(svc.get_or_create_active_cart(user.id).id, book.id).quantity == 2

    def test_accumulated_quantity_may_exceed_request_limit(self, db, user, make_book):
        """Limit 1..999 dotyczy pojedynczego zadania, nie sumy w linii."""
        book = make_book(stock=5000)
        svc = CartService(db)
        svc.add_item(user.id, book.id, 998)

        item = svc.add_item(user.id, book.id, 2)

        assert item.quantity == 1000

    def test_deleted_book(self, db, user, make_book):
        book = make_book()
        book.mark_deleted()
        db.commit()

        with pytest.raises(NotFoundError):
            CartService(db).add_item(user.id, book.id, 1)

    def test_missing_book(self, db, user):
        with pytest.raises(NotFoundError):
            CartService(db).add_item(user.id, 999, 1)


class TestUpdateAndRemove:
    def test_update_sets_quantity(self, db, user, make_book):
        book = make_book(stock=10)
        svc = CartService(db)
        svc.add_item(user.id, book.id, 1)

        item = svc.update_item(user.id, book.id, 7)

        assert item.quantity == 7

    def test_update_missing_line(self, db, user, make_book):
        book = make_book()
        with pytest.raises(NotFoundError):
            CartService(db).update_item(user.id, book.id, 1)

    def test_update_above_stock(self, db, user, make_book):
        book = make_book(stock=4)
        svc = CartService(db)
        svc.add_item(user.id, book.id, 1)

        with pytest.raises(UnprocessableError):
            svc.update_item(user.id, book.id, 5)

    def test_remove_is_idempotent(self, db, user, make_book):
        book = make_book()
        svc = CartService(db)
        svc.add_item(user.id, book.id, 1)

        first = svc.remove_item(user.id, book.id)
        second = svc.remove_item(user.id, book.id)

        assert first == second
        assert first["book_id"] == book.id
        assert svc.repo.count_live_items(first["cart_id"]) == 0


class TestListCart:
    def test_subtotal_covers_page_and_total_covers_cart(self, db, user, make_book):
        svc = CartService(db)
        for price in ("1000", "2000", "3000"):
            book = make_book(title=f"Book {price}", price=price)
            svc.add_item(user.id, book.id, 1)

        view = svc.list_cart(user.id, PageRequest.of(page=1, size=2))

        assert view["total_elements"] == 3
        assert view["total_pages"] == 2
        assert len(view["content"]) == 2
        assert view["summary"]["subtotal"] == sum(e["line_total"] for e in view["content"])
        assert view["summary"]["cart_total"] == Decimal("6000")
        assert view["summary"]["currency"] == "KRW"

    def test_deleted_books_are_hidden(self, db, user, make_book):
        svc = CartService(db)
        kept = make_book(title="Kept")
        gone = make_book(title="Gone")
        svc.add_item(user.id, kept.id, 1)
        svc.add_item(user.id, gone.id, 1)

        gone.mark_deleted()
        db.commit()
        view = svc.list_cart(user.id, PageRequest.of())

        assert [e["book_id"] for e in view["content"]] == [kept.id]
        assert view["summary"]["cart_total"] == Decimal("10000")

    def test_empty_cart(self, db, user):
        view = CartService(db).list_cart(user.id, PageRequest.of())

        assert view["content"] == []
        assert view["summary"]["subtotal"] == Decimal("0")
        assert view["cart"].user_id == user.id


@pytest.fixture
def two_sessions(tmp_path):
    """Dwie sesje na osobnych polaczeniach do jednej bazy plikowej."""
    file_engine = create_engine(
        f"sqlite:///{tmp_path / 'interleave.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=file_engine)
    factory = sessionmaker(bind=file_engine, autoflush=False, expire_on_commit=False)
    a, b = factory(), factory()
    try:
        yield a, b
    finally:
        a.close()
        b.close()
        file_engine.dispose()


class TestCheckoutInterleaving:
    def test_add_after_concurrent_checkout_lands_in_new_cart(self, two_sessions):
        a, b = two_sessions
        buyer = UserModel(email="buyer@example.com", name="Buyer", role=UserRole.CUSTOMER)
        first = BookModel(title="First", price=Decimal("1000"), stock=5)
        second = BookModel(title="Second", price=Decimal("2000"), stock=5)
        a.add_all([buyer, first, second])
        a.commit()

        first_item = CartService(a).add_item(buyer.id, first.id, 1)

        real_lookup = BookRepo.get_live_book
        orders = []

        def checkout_in_between(repo, book_id):
            if not orders:
                orders.append(OrderService(b).create_order_from_cart(buyer.id))
            return real_lookup(repo, book_id)

        with patch.object(BookRepo, "get_live_book", autospec=True, side_effect=checkout_in_between):
            item = CartService(a).add_item(buyer.id, second.id, 1)

        assert item.cart_id != first_item.cart_id
        assert CartRepo(a).count_active_carts(buyer.id) == 1

        new_cart = CartRepo(a).get_active_cart(buyer.id)
        assert new_cart.id == item.cart_id
        assert [i.book_id for i in CartRepo(a).get_cart_items(new_cart.id)] == [second.id]

        order = OrderService(a).get_order(buyer.id, orders[0]["order_id"])
        assert [i["book_id"] for i in order["items"]] == [first.id]
        assert order["total_amount"] == Decimal("1000")
