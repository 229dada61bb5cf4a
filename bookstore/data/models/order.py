from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from bookstore.data.database import Base, utcnow
from bookstore.domain.enums import OrderStatus, PaymentStatus


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    # unikalny: jeden koszyk -> co najwyzej jedno zamowienie
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="SET NULL"), nullable=True, unique=True)

    status = Column(Enum(OrderStatus, native_enum=False, length=20), nullable=False, default=OrderStatus.PENDING, index=True)
    payment_status = Column(Enum(PaymentStatus, native_enum=False, length=20), nullable=False, default=PaymentStatus.UNPAID, index=True)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)

    placed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
    )
