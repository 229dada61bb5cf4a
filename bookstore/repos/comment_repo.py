# bookstore/repos/comment_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from bookstore.data.models.comment import CommentLikeModel, CommentModel


class CommentRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_comment(self, comment_id: int, for_update: bool = False) -> CommentModel | None:
        return self.db.get(CommentModel, comment_id, with_for_update=for_update or None, populate_existing=for_update)

    def get_live_comment(self, comment_id: int, for_update: bool = False) -> CommentModel | None:
        stmt = CommentModel.live().where(CommentModel.id == comment_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_review_comments(self, review_id: int) -> List[CommentModel]:
        return list(
            self.db.execute(
                CommentModel.live()
                .options(joinedload(CommentModel.user))
                .where(CommentModel.review_id == review_id)
                .order_by(CommentModel.created_at.asc(), CommentModel.id.asc())
            ).scalars().all()
        )

    def add_comment(self, comment: CommentModel) -> CommentModel:
        self.db.add(comment)
        self.db.flush()
        return comment

    def get_like(self, user_id: int, comment_id: int) -> CommentLikeModel | None:
        return self.db.get(CommentLikeModel, (user_id, comment_id), populate_existing=True)

    def add_like(self, like: CommentLikeModel) -> CommentLikeModel:
        self.db.add(like)
        self.db.flush()
        return like

    def delete_like(self, like: CommentLikeModel) -> None:
        self.db.delete(like)
        self.db.flush()
