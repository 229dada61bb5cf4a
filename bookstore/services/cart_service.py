# bookstore/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookstore.data.database import transaction
from bookstore.data.models.cart import CartModel
from bookstore.data.models.cart_item import CartItemModel
from bookstore.domain.enums import CartStatus
from bookstore.domain.errors import NotFoundError, UnprocessableError, ValidationFailedError
from bookstore.repos.book_repo import BookRepo
from bookstore.repos.cart_repo import CartRepo
from bookstore.utils.logging import get_logger
from bookstore.utils.paging import PageRequest, Sort, page_payload
from bookstore.utils.retry import conflict_retry
from bookstore.utils.settings import CART_ITEM_MAX_QUANTITY, DEFAULT_CURRENCY

logger = get_logger(__name__)

_LIST_SORT = Sort(field="createdAt", descending=True)


class CartService:
    """
    Use case'y koszyka:
    commands (add, update, remove) zmieniaja pozycje ACTIVE koszyka,
    query (list) tylko odczyt.
    Kazda komenda to jedna transakcja i dokladnie jeden zapis pozycji.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.books = BookRepo(db)

    #get-or-create
    @conflict_retry()
    def get_or_create_active_cart(self, user_id: int) -> CartModel:
        """
        Zwraca ACTIVE koszyk uzytkownika, tworzy go przy pierwszym uzyciu.

        Tworzenie idzie we wlasnej krotkiej transakcji. Rownolegly tworca
        przegrywa na czesciowym unikalnym indeksie (user_id WHERE ACTIVE),
        dostaje IntegrityError, a ponowienie znajduje koszyk zwyciezcy.
        """
        existing = self.repo.get_active_cart(user_id)
        if existing:
            return existing

        try:
            with transaction(self.db):
                created = self.repo.create_cart(CartModel(user_id=user_id, status=CartStatus.ACTIVE))
        except IntegrityError:
            logger.warning(f"Concurrent cart creation for user {user_id}, retrying lookup")
            raise

        logger.info(f"Created active cart {created.id} for user {user_id}")
        return created

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if not isinstance(quantity, int) or isinstance(quantity, bool) or not 1 <= quantity <= CART_ITEM_MAX_QUANTITY:
            raise ValidationFailedError(
                f"quantity must be an integer between 1 and {CART_ITEM_MAX_QUANTITY}",
                {"quantity": quantity},
            )

    def _get_live_book(self, book_id: int):
        book = self.books.get_live_book(book_id)
        if not book:
            raise NotFoundError("Book not found", {"bookId": book_id})
        return book

    def _claim_cart(self, user_id: int) -> CartModel:
        """
        ACTIVE koszyk zablokowany w biezacej transakcji; checkout tego koszyka
        czeka na commit. Zamkniety w miedzyczasie koszyk -> nowy ACTIVE.
        """
        cart = self.repo.claim_active_cart(user_id)
        if cart is None:
            cart = self.repo.create_cart(CartModel(user_id=user_id, status=CartStatus.ACTIVE))
            logger.info(f"Created active cart {cart.id} for user {user_id}")
        return cart

    #commands
    @conflict_retry()
    def add_item(self, user_id: int, book_id: int, quantity: int) -> CartItemModel:
        self._check_quantity(quantity)

        with transaction(self.db):
            book = self._get_live_book(book_id)
            if quantity > book.stock:
                raise UnprocessableError("Not enough stock", {"stock": book.stock, "requested": quantity})

            cart = self._claim_cart(user_id)
            existing = self.repo.get_cart_item(cart.id, book_id, for_update=True)

            if existing is None:
                # cena lapana teraz i zamrazana w pozycji koszyka
                item = self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        book_id=book_id,
                        quantity=quantity,
                        unit_price=book.price,
                    )
                )
                logger.info(f"Added book {book_id} x{quantity} to cart {cart.id} at {book.price}")
            else:
                # limit pola quantity dotyczy zadania, suma linii tylko stocku
                new_quantity = existing.quantity + quantity
                if new_quantity > book.stock:
                    raise UnprocessableError(
                        "Cannot add more than the available stock",
                        {"stock": book.stock, "inCart": existing.quantity, "requested": quantity},
                    )
                # unit_price zostaje z pierwszego dodania
                existing.quantity = new_quantity
                item = existing
                self.db.flush()
                logger.info(
                    f"Book {book_id} already in cart {cart.id}, quantity "
                    f"{new_quantity - quantity} -> {new_quantity}"
                )

        return item

    @conflict_retry()
    def update_item(self, user_id: int, book_id: int, quantity: int) -> CartItemModel:
        self._check_quantity(quantity)

        with transaction(self.db):
            book = self._get_live_book(book_id)
            if quantity > book.stock:
                raise UnprocessableError("Not enough stock", {"stock": book.stock, "requested": quantity})

            cart = self._claim_cart(user_id)
            existing = self.repo.get_cart_item(cart.id, book_id, for_update=True)
            if existing is None:
                raise NotFoundError("Cart item not found", {"bookId": book_id})

            existing.quantity = quantity
            self.db.flush()

        logger.info(f"Cart {cart.id}: book {book_id} quantity set to {quantity}")
        return existing

    @conflict_retry()
    def remove_item(self, user_id: int, book_id: int) -> Dict[str, Any]:
        with transaction(self.db):
            cart = self._claim_cart(user_id)
            removed = self.repo.delete_cart_item(cart.id, book_id)

        if removed:
            logger.info(f"Removed book {book_id} from cart {cart.id}")
        else:
            logger.debug(f"Book {book_id} not in cart {cart.id}, nothing to remove")

        return {"cart_id": cart.id, "book_id": book_id}

    #query
    def list_cart(self, user_id: int, request: PageRequest) -> Dict[str, Any]:
        cart = self.get_or_create_active_cart(user_id)

        total = self.repo.count_live_items(cart.id)
        items = self.repo.list_live_items(cart.id, request.offset, request.size)

        # subtotal liczony tylko po pozycjach tej strony; cart_total po calym koszyku
        subtotal = sum((i.unit_price * i.quantity for i in items), Decimal("0"))

        payload = page_payload(
            [
                {
                    "book_id": i.book_id,
                    "quantity": i.quantity,
                    "unit_price": i.unit_price,
                    "line_total": i.unit_price * i.quantity,
                    "added_at": i.created_at,
                    "updated_at": i.updated_at,
                    "book": i.book,
                }
                for i in items
            ],
            request,
            total,
            _LIST_SORT,
        )
        payload["cart"] = cart
        payload["summary"] = {
            "subtotal": subtotal,
            "cart_total": self.repo.live_total(cart.id),
            "currency": items[0].book.currency if items else DEFAULT_CURRENCY,
        }
        return payload
