# bookstore/services/review_service.py
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookstore.data.database import transaction
from bookstore.data.models.review import ReviewLikeModel, ReviewModel
from bookstore.domain.errors import (
    DuplicateResourceError,
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)
from bookstore.repos.book_repo import BookRepo
from bookstore.repos.review_repo import ReviewRepo
from bookstore.services.rating_service import recompute_book_rating
from bookstore.utils.logging import get_logger
from bookstore.utils.paging import PageRequest, page_payload, parse_sort

logger = get_logger(__name__)

REVIEW_SORT_FIELDS = ("likeCount", "rating", "createdAt")
TITLE_MAX_LENGTH = 100
TOP_LIMIT_MAX = 50


def _check_rating(rating) -> int:
    if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
        raise ValidationFailedError("rating must be an integer between 1 and 5", {"rating": rating})
    return rating


def _check_title(title):
    if title is not None and len(title) > TITLE_MAX_LENGTH:
        raise ValidationFailedError(f"title must be at most {TITLE_MAX_LENGTH} characters")
    return title


def _check_content(content) -> str:
    if not isinstance(content, str) or not content.strip():
        raise ValidationFailedError("content is required")
    return content.strip()


class ReviewService:
    """
    Recenzje: jedna na (user, book), edycja i usuwanie tylko przez autora.
    Kazda zmiana zbioru recenzji przelicza agregat ksiazki w tej samej
    transakcji; like/unlike zmienia like_count razem z wierszem like.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepo(db)
        self.books = BookRepo(db)

    #query
    def list_for_book(self, book_id: int, request: PageRequest) -> Dict[str, Any]:
        book = self.books.get_live_book(book_id)
        if not book:
            raise NotFoundError("Book not found", {"bookId": book_id})

        sort = parse_sort(request.sort, REVIEW_SORT_FIELDS, "likeCount")
        total = self.repo.count_book_reviews(book_id)
        reviews = self.repo.list_book_reviews(book_id, sort, request.offset, request.size)

        payload = page_payload(reviews, request, total, sort)
        payload["book"] = book
        return payload

    def top(self, limit: int | None = None, sort: str | None = None) -> Dict[str, Any]:
        limit = min(max(limit or 10, 1), TOP_LIMIT_MAX)
        parsed = parse_sort(sort, REVIEW_SORT_FIELDS, "likeCount")
        return {
            "limit": limit,
            "sort": parsed.label(),
            "items": self.repo.top_reviews(parsed, limit),
        }

    #commands
    def create(self, user_id: int, book_id: int, rating: int, content: str, title: str | None = None) -> ReviewModel:
        rating = _check_rating(rating)
        content = _check_content(content)
        title = _check_title(title)

        try:
            with transaction(self.db):
                if not self.books.get_live_book(book_id):
                    raise NotFoundError("Book not found", {"bookId": book_id})

                if self.repo.find_user_review(user_id, book_id):
                    raise DuplicateResourceError(
                        "You have already reviewed this book", {"bookId": book_id}
                    )

                review = self.repo.add_review(
                    ReviewModel(
                        user_id=user_id,
                        book_id=book_id,
                        rating=rating,
                        title=title,
                        content=content,
                    )
                )
                recompute_book_rating(self.db, book_id)
        except IntegrityError:
            # wyscig dwoch rownoleglych recenzji tego samego uzytkownika
            raise DuplicateResourceError("You have already reviewed this book", {"bookId": book_id})

        logger.info(f"Review {review.id} created by user {user_id} for book {book_id}")
        return review

    def _owned_live_review(self, user_id: int, review_id: int) -> ReviewModel:
        review = self.repo.get_review(review_id, for_update=True)
        if not review or review.is_deleted:
            raise NotFoundError("Review not found", {"reviewId": review_id})
        if review.user_id != user_id:
            raise ForbiddenError("Only the author can modify this review")
        return review

    def update(
        self,
        user_id: int,
        review_id: int,
        rating: int | None = None,
        title: str | None = None,
        content: str | None = None,
    ) -> ReviewModel:
        if rating is None and title is None and content is None:
            raise ValidationFailedError("Nothing to update")

        with transaction(self.db):
            review = self._owned_live_review(user_id, review_id)

            if rating is not None:
                review.rating = _check_rating(rating)
            if title is not None:
                review.title = _check_title(title)
            if content is not None:
                review.content = _check_content(content)
            self.db.flush()

            recompute_book_rating(self.db, review.book_id)

        logger.info(f"Review {review_id} updated by user {user_id}")
        return review

    def delete(self, user_id: int, review_id: int) -> ReviewModel:
        with transaction(self.db):
            review = self.repo.get_review(review_id, for_update=True)
            if not review:
                raise NotFoundError("Review not found", {"reviewId": review_id})
            if review.user_id != user_id:
                raise ForbiddenError("Only the author can delete this review")

            if review.is_deleted:
                logger.debug(f"Review {review_id} already deleted")
                return review

            review.mark_deleted()
            removed_likes = self.repo.delete_review_likes(review_id)
            review.like_count = 0
            self.db.flush()

            recompute_book_rating(self.db, review.book_id)

        logger.info(f"Review {review_id} soft-deleted by user {user_id}, {removed_likes} likes removed")
        return review

    def like(self, user_id: int, review_id: int) -> None:
        with transaction(self.db):
            review = self.repo.get_live_review(review_id, for_update=True)
            if not review:
                raise NotFoundError("Review not found", {"reviewId": review_id})

            if self.repo.get_like(user_id, review_id):
                logger.debug(f"User {user_id} already likes review {review_id}")
                return

            self.repo.add_like(ReviewLikeModel(user_id=user_id, review_id=review_id))
            review.like_count += 1

        logger.info(f"User {user_id} liked review {review_id}")

    def unlike(self, user_id: int, review_id: int) -> None:
        with transaction(self.db):
            review = self.repo.get_review(review_id, for_update=True)
            like = self.repo.get_like(user_id, review_id) if review else None
            if not like:
                logger.debug(f"User {user_id} does not like review {review_id}, nothing to undo")
                return

            self.repo.delete_like(like)
            review.like_count = max(review.like_count - 1, 0)

        logger.info(f"User {user_id} unliked review {review_id}")
