"""
Tests for review comments.
"""
import pytest

from bookstore.data.database import SessionLocal
from bookstore.domain.errors import ForbiddenError, NotFoundError, ValidationFailedError
from bookstore.services.comment_service import CommentService
from bookstore.services.review_service import ReviewService


@pytest.fixture
def review(db, make_user, make_book):
    return ReviewService(db).create(make_user().id, make_book().id, 4, "Solid")


class TestComments:
    def test_create_increments_counter(self, db, user, review):
        svc = CommentService(db)
        svc.create(user.id, review.id, "Agreed")
        svc.create(user.id, review.id, "Still agreed")

        db.refresh(review)
        assert review.comment_count == 2

    def test_reply_to_parent(self, db, user, review):
        svc = CommentService(db)
        parent = svc.create(user.id, review.id, "Question?")

        reply = svc.create(user.id, review.id, "Answer.", parent_id=parent.id)

        assert reply.parent_id == parent.id

    def test_parent_from_other_review(self, db, user, make_user, make_book, review):
        other = ReviewService(db).create(make_user().id, make_book().id, 3, "Meh")
        parent = CommentService(db).create(user.id, other.id, "Elsewhere")

        with pytest.raises(NotFoundError):
            CommentService(db).create(user.id, review.id, "Reply", parent_id=parent.id)

    def test_blank_content(self, db, user, review):
        with pytest.raises(ValidationFailedError):
            CommentService(db).create(user.id, review.id, "  ")

    def test_review_must_be_live(self, db, user, review):
        ReviewService(db).delete(review.user_id, review.id)
        with pytest.raises(NotFoundError):
            CommentService(db).create(user.id, review.id, "Late")

    def test_update_by_owner_only(self, db, user, make_user, review):
        comment = CommentService(db).create(user.id, review.id, "Typo")

        with pytest.raises(ForbiddenError):
            CommentService(db).update(make_user().id, comment.id, "Hijack")

        updated = CommentService(db).update(user.id, comment.id, "Fixed")
        assert updated.content == "Fixed"

    def test_delete_decrements_once(self, db, user, review):
        svc = CommentService(db)
        comment = svc.create(user.id, review.id, "Bye")

        svc.delete(user.id, comment.id)
        svc.delete(user.id, comment.id)

        db.refresh(review)
        assert review.comment_count == 0

    def test_list_live_oldest_first(self, db, user, review):
        svc = CommentService(db)
        first = svc.create(user.id, review.id, "First")
        gone = svc.create(user.id, review.id, "Gone")
        last = svc.create(user.id, review.id, "Last")
        svc.delete(user.id, gone.id)

        assert [c.id for c in svc.list_for_review(review.id)] == [first.id, last.id]

    def test_like_idempotent(self, db, user, make_user, review):
        svc = CommentService(db)
        comment = svc.create(user.id, review.id, "Nice")
        fan = make_user()

        svc.like(fan.id, comment.id)
        svc.like(fan.id, comment.id)
        db.refresh(comment)
        assert comment.like_count == 1

        svc.unlike(fan.id, comment.id)
        svc.unlike(fan.id, comment.id)
        db.refresh(comment)
        assert comment.like_count == 0

    def test_unlike_with_stale_like_in_session(self, db, user, make_user, review):
        svc = CommentService(db)
        comment = svc.create(user.id, review.id, "Nice")
        fan, other = make_user(), make_user()
        svc.like(fan.id, comment.id)
        svc.like(other.id, comment.id)

        elsewhere = SessionLocal()
        try:
            CommentService(elsewhere).unlike(fan.id, comment.id)
        finally:
            elsewhere.close()

        svc.unlike(fan.id, comment.id)

        db.refresh(comment)
        assert comment.like_count == 1
