from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from bookstore.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), primary_key=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="RESTRICT"), primary_key=True, index=True)

    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(12, 2), nullable=False)
    # tytul zamrozony w chwili zakupu
    book_title_snapshot = Column(String(255), nullable=False)

    order = relationship("OrderModel", back_populates="items")
    book = relationship("BookModel")
