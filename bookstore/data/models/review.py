from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from bookstore.data.database import Base, utcnow
from bookstore.data.soft_delete import SoftDeleteMixin


class ReviewModel(SoftDeleteMixin, Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(100), nullable=True)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False, index=True)

    # liczniki zmieniane razem z wierszami like/comment
    like_count = Column(Integer, nullable=False, default=0)
    comment_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("UserModel")
    book = relationship("BookModel")

    __table_args__ = (UniqueConstraint("user_id", "book_id", name="u_review_user_book"),)


class ReviewLikeModel(Base):
    __tablename__ = "review_likes"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
