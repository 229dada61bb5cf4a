# bookstore/repos/wishlist_repo.py
from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, joinedload

from bookstore.data.models.book import BookModel
from bookstore.data.models.wishlist import WishlistItemModel


class WishlistRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, user_id: int, book_id: int) -> WishlistItemModel | None:
        return self.db.get(WishlistItemModel, (user_id, book_id))

    def add_item(self, item: WishlistItemModel) -> WishlistItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, user_id: int, book_id: int) -> int:
        result = self.db.execute(
            delete(WishlistItemModel).where(
                WishlistItemModel.user_id == user_id,
                WishlistItemModel.book_id == book_id,
            )
        )
        return result.rowcount

    def _live_items(self, user_id: int):
        return (
            select(WishlistItemModel)
            .join(BookModel, BookModel.id == WishlistItemModel.book_id)
            .where(WishlistItemModel.user_id == user_id, BookModel.is_live())
        )

    def count_items(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(self._live_items(user_id).subquery())
        ).scalar_one()

    def list_items(self, user_id: int, descending: bool, offset: int, limit: int) -> List[WishlistItemModel]:
        order = WishlistItemModel.created_at.desc() if descending else WishlistItemModel.created_at.asc()
        return list(
            self.db.execute(
                self._live_items(user_id)
                .options(joinedload(WishlistItemModel.book))
                .order_by(order, WishlistItemModel.book_id.desc())
                .offset(offset)
                .limit(limit)
            ).scalars().all()
        )
