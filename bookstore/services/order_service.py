# bookstore/services/order_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from bookstore.data.database import transaction, utcnow
from bookstore.data.models.order import OrderModel
from bookstore.data.models.order_item import OrderItemModel
from bookstore.domain.enums import CartStatus, OrderStatus, PaymentStatus
from bookstore.domain.errors import NotFoundError, UnprocessableError
from bookstore.repos.book_repo import BookRepo
from bookstore.repos.cart_repo import CartRepo
from bookstore.repos.order_repo import OrderRepo
from bookstore.utils.logging import get_logger
from bookstore.utils.paging import PageRequest, page_payload, parse_sort

logger = get_logger(__name__)

ORDER_SORT_FIELDS = ("createdAt", "totalAmount", "status")


class OrderService:
    """
    Serwis zamowien. Checkout (koszyk -> zamowienie) to jedyna operacja
    systemu, ktora musi byc w calosci atomowa.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.books = BookRepo(db)

    def create_order_from_cart(self, user_id: int) -> Dict[str, Any]:
        """
        Use Case: checkout ACTIVE koszyka.

        Jedna transakcja, wszystko albo nic:
        1. ACTIVE koszyk zajety (FOR UPDATE + warunkowy UPDATE), brak -> 404
        2. pozycje + ksiazki (FOR UPDATE, rosnaco po id)
        3. pusty koszyk -> 422
        4. usunieta ksiazka albo stock < quantity -> 422
        5. total z cen zamrozonych w koszyku
        6. Order PENDING / UNPAID
        7. OrderItem ze snapshotem tytulu + zmniejszenie stocku
        8. koszyk -> CHECKED_OUT

        Blokady wierszy ksiazek trzymane do commita: rownolegly checkout
        albo edycja stocku czeka i czyta juz nowy stan.
        """
        with transaction(self.db):
            cart = self.carts.claim_active_cart(user_id)
            if not cart:
                raise NotFoundError("No active cart", {"userId": user_id})

            items = self.carts.get_cart_items(cart.id)
            if not items:
                raise UnprocessableError("Cart is empty", {"cartId": cart.id})

            books = self.books.lock_books(i.book_id for i in items)

            for item in items:
                book = books[item.book_id]
                if book.is_deleted:
                    raise UnprocessableError("Cart contains a deleted book", {"bookId": book.id})
                if book.stock < item.quantity:
                    raise UnprocessableError(
                        "Not enough stock",
                        {"bookId": book.id, "stock": book.stock, "requested": item.quantity},
                    )

            total = sum((i.unit_price * i.quantity for i in items), Decimal("0"))

            order = self.repo.create_order(
                OrderModel(
                    user_id=user_id,
                    cart_id=cart.id,
                    status=OrderStatus.PENDING,
                    payment_status=PaymentStatus.UNPAID,
                    total_amount=total,
                    placed_at=utcnow(),
                )
            )

            for item in items:
                book = books[item.book_id]
                self.repo.add_order_item(
                    OrderItemModel(
                        order_id=order.id,
                        book_id=book.id,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        book_title_snapshot=book.title,
                    )
                )
                book.stock -= item.quantity

            cart.status = CartStatus.CHECKED_OUT
            self.db.flush()

        logger.info(f"Order {order.id} placed by user {user_id} from cart {cart.id}, total {total}")

        return {"order_id": order.id, "created_at": order.created_at}

    #query
    def list_orders(self, user_id: int, request: PageRequest) -> Dict[str, Any]:
        sort = parse_sort(request.sort, ORDER_SORT_FIELDS, "createdAt")
        total = self.repo.count_user_orders(user_id)
        orders = self.repo.list_user_orders(user_id, sort, request.offset, request.size)
        return page_payload(orders, request, total, sort)

    def get_order(self, user_id: int, order_id: int) -> Dict[str, Any]:
        order = self.repo.get_user_order(order_id, user_id)
        if not order:
            raise NotFoundError("Order not found", {"orderId": order_id})

        return {
            "id": order.id,
            "status": order.status,
            "payment_status": order.payment_status,
            "total_amount": order.total_amount,
            "placed_at": order.placed_at,
            "created_at": order.created_at,
            "updated_at": order.updated_at,
            "items": [
                {
                    "book_id": i.book_id,
                    "book_title": i.book_title_snapshot,
                    "quantity": i.quantity,
                    "unit_price": i.unit_price,
                    "line_total": i.unit_price * i.quantity,
                }
                for i in order.items
            ],
        }
