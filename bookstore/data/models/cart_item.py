from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from bookstore.data.database import Base, utcnow


class CartItemModel(Base):
    __tablename__ = "cart_items"

    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), primary_key=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="RESTRICT"), primary_key=True, index=True)

    quantity = Column(Integer, nullable=False, default=1)
    # cena z chwili dodania, nie odswiezana przy kolejnych dodaniach ani przy checkout
    unit_price = Column(Numeric(12, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    cart = relationship("CartModel", back_populates="items")
    book = relationship("BookModel")
