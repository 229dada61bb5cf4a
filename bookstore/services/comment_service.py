# bookstore/services/comment_service.py
from typing import List

from sqlalchemy.orm import Session

from bookstore.data.database import transaction
from bookstore.data.models.comment import CommentLikeModel, CommentModel
from bookstore.domain.errors import ForbiddenError, NotFoundError, ValidationFailedError
from bookstore.repos.comment_repo import CommentRepo
from bookstore.repos.review_repo import ReviewRepo
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)


def _check_content(content) -> str:
    if not isinstance(content, str) or not content.strip():
        raise ValidationFailedError("content is required")
    return content.strip()


class CommentService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CommentRepo(db)
        self.reviews = ReviewRepo(db)

    def list_for_review(self, review_id: int) -> List[CommentModel]:
        return self.repo.list_review_comments(review_id)

    def create(self, user_id: int, review_id: int, content: str, parent_id: int | None = None) -> CommentModel:
        content = _check_content(content)

        with transaction(self.db):
            review = self.reviews.get_live_review(review_id, for_update=True)
            if not review:
                raise NotFoundError("Review not found", {"reviewId": review_id})

            if parent_id is not None:
                parent = self.repo.get_live_comment(parent_id)
                if not parent or parent.review_id != review_id:
                    raise NotFoundError("Parent comment not found", {"parentId": parent_id})

            comment = self.repo.add_comment(
                CommentModel(
                    review_id=review_id,
                    user_id=user_id,
                    parent_id=parent_id,
                    content=content,
                )
            )
            review.comment_count += 1

        logger.info(f"Comment {comment.id} added to review {review_id} by user {user_id}")
        return comment

    def update(self, user_id: int, comment_id: int, content: str) -> CommentModel:
        content = _check_content(content)

        with transaction(self.db):
            comment = self.repo.get_live_comment(comment_id, for_update=True)
            if not comment:
                raise NotFoundError("Comment not found", {"commentId": comment_id})
            if comment.user_id != user_id:
                raise ForbiddenError("Only the author can modify this comment")

            comment.content = content
            self.db.flush()

        logger.info(f"Comment {comment_id} updated by user {user_id}")
        return comment

    def delete(self, user_id: int, comment_id: int) -> CommentModel:
        with transaction(self.db):
            comment = self.repo.get_comment(comment_id)
            if not comment:
                raise NotFoundError("Comment not found", {"commentId": comment_id})
            if comment.user_id != user_id:
                raise ForbiddenError("Only the author can delete this comment")

            if comment.is_deleted:
                logger.debug(f"Comment {comment_id} already deleted")
                return comment

            comment.mark_deleted()
            review = self.reviews.get_review(comment.review_id, for_update=True)
            review.comment_count = max(review.comment_count - 1, 0)
            self.db.flush()

        logger.info(f"Comment {comment_id} soft-deleted by user {user_id}")
        return comment

    def like(self, user_id: int, comment_id: int) -> None:
        with transaction(self.db):
            comment = self.repo.get_live_comment(comment_id, for_update=True)
            if not comment:
                raise NotFoundError("Comment not found", {"commentId": comment_id})

            if self.repo.get_like(user_id, comment_id):
                logger.debug(f"User {user_id} already likes comment {comment_id}")
                return

            self.repo.add_like(CommentLikeModel(user_id=user_id, comment_id=comment_id))
            comment.like_count += 1

        logger.info(f"User {user_id} liked comment {comment_id}")

    def unlike(self, user_id: int, comment_id: int) -> None:
        with transaction(self.db):
            comment = self.repo.get_comment(comment_id, for_update=True)
            like = self.repo.get_like(user_id, comment_id) if comment else None
            if not like:
                logger.debug(f"User {user_id} does not like comment {comment_id}, nothing to undo")
                return

            self.repo.delete_like(like)
            comment.like_count = max(comment.like_count - 1, 0)

        logger.info(f"User {user_id} unliked comment {comment_id}")
