# bookstore/domain/enums.py
import enum


class UserRole(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class BookFormat(str, enum.Enum):
    PAPERBACK = "PAPERBACK"
    HARDCOVER = "HARDCOVER"
    EBOOK = "EBOOK"
    AUDIOBOOK = "AUDIOBOOK"


class CartStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    CHECKED_OUT = "CHECKED_OUT"
    # ustawiany tylko z zewnatrz, brak automatycznego przejscia
    ABANDONED = "ABANDONED"


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class PaymentStatus(str, enum.Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    FAILED = "FAILED"
