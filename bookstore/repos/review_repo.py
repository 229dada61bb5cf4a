# bookstore/repos/review_repo.py
from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, joinedload

from bookstore.data.models.review import ReviewLikeModel, ReviewModel
from bookstore.utils.paging import Sort

SORT_COLUMNS = {
    "likeCount": ReviewModel.like_count,
    "rating": ReviewModel.rating,
    "createdAt": ReviewModel.created_at,
}


class ReviewRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_review(self, review_id: int, for_update: bool = False) -> ReviewModel | None:
        stmt = select(ReviewModel).where(ReviewModel.id == review_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_live_review(self, review_id: int, for_update: bool = False) -> ReviewModel | None:
        stmt = ReviewModel.live().where(ReviewModel.id == review_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_user_review(self, user_id: int, book_id: int) -> ReviewModel | None:
        """Takze usuniete: unikalny klucz (user, book) obejmuje wszystkie wiersze."""
        return self.db.execute(
            select(ReviewModel).where(ReviewModel.user_id == user_id, ReviewModel.book_id == book_id)
        ).scalar_one_or_none()

    def add_review(self, review: ReviewModel) -> ReviewModel:
        self.db.add(review)
        self.db.flush()
        return review

    def count_book_reviews(self, book_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(ReviewModel).where(
                ReviewModel.book_id == book_id, ReviewModel.is_live()
            )
        ).scalar_one()

    def list_book_reviews(self, book_id: int, sort: Sort, offset: int, limit: int) -> List[ReviewModel]:
        column = SORT_COLUMNS[sort.field]
        order = column.desc() if sort.descending else column.asc()
        return list(
            self.db.execute(
                ReviewModel.live()
                .options(joinedload(ReviewModel.user))
                .where(ReviewModel.book_id == book_id)
                .order_by(order, ReviewModel.id.desc())
                .offset(offset)
                .limit(limit)
            ).scalars().all()
        )

    def top_reviews(self, sort: Sort, limit: int) -> List[ReviewModel]:
        column = SORT_COLUMNS[sort.field]
        order = column.desc() if sort.descending else column.asc()
        return list(
            self.db.execute(
                ReviewModel.live()
                .options(joinedload(ReviewModel.user), joinedload(ReviewModel.book))
                .order_by(order, ReviewModel.id.desc())
                .limit(limit)
            ).scalars().all()
        )

    def rating_aggregate(self, book_id: int) -> tuple[int, float | None]:
        count, avg = self.db.execute(
            select(func.count(ReviewModel.id), func.avg(ReviewModel.rating)).where(
                ReviewModel.book_id == book_id, ReviewModel.is_live()
            )
        ).one()
        return count, avg

    # --- likes ---
    def get_like(self, user_id: int, review_id: int) -> ReviewLikeModel | None:
        return self.db.get(ReviewLikeModel, (user_id, review_id), populate_existing=True)

    def add_like(self, like: ReviewLikeModel) -> ReviewLikeModel:
        self.db.add(like)
        self.db.flush()
        return like

    def delete_like(self, like: ReviewLikeModel) -> None:
        self.db.delete(like)
        self.db.flush()

    def delete_review_likes(self, review_id: int) -> int:
        result = self.db.execute(delete(ReviewLikeModel).where(ReviewLikeModel.review_id == review_id))
        return result.rowcount
