# bookstore/api/routers/reviews.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookstore.api.deps import CurrentUser, get_current_user, page_params
from bookstore.data.database import get_db
from bookstore.domain.schemas import (
    ApiResponse,
    BookReviewsOut,
    ReviewChangeOut,
    ReviewIn,
    ReviewUpdateIn,
    TopReviewsOut,
    ok,
)
from bookstore.services.review_service import ReviewService
from bookstore.utils.paging import PageRequest

router = APIRouter(prefix="/reviews", tags=["reviews"])


def get_service(db: Session):
    return ReviewService(db)


def _change(review) -> ReviewChangeOut:
    return ReviewChangeOut(
        review_id=review.id,
        created_at=review.created_at,
        updated_at=review.updated_at,
        deleted_at=review.deleted_at,
    )


@router.get("/top", response_model=ApiResponse[TopReviewsOut])
def top_reviews(
    limit: int | None = Query(None),
    sort: str | None = Query(None),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(TopReviewsOut.model_validate(svc.top(limit, sort), from_attributes=True))


@router.get("/books/{book_id}", response_model=ApiResponse[BookReviewsOut])
def list_book_reviews(
    book_id: int,
    request: PageRequest = Depends(page_params),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(BookReviewsOut.model_validate(svc.list_for_book(book_id, request), from_attributes=True))


@router.post("/books/{book_id}", response_model=ApiResponse[ReviewChangeOut], status_code=201)
def create_review(
    book_id: int,
    payload: ReviewIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    review = svc.create(user.id, book_id, payload.rating, payload.content, payload.title)
    return ok(_change(review), "Review created")


@router.patch("/{review_id}", response_model=ApiResponse[ReviewChangeOut])
def update_review(
    review_id: int,
    payload: ReviewUpdateIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    review = svc.update(
        user.id,
        review_id,
        rating=payload.rating,
        title=payload.title,
        content=payload.content,
    )
    return ok(_change(review), "Review updated")


@router.delete("/{review_id}", response_model=ApiResponse[ReviewChangeOut])
def delete_review(
    review_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(_change(svc.delete(user.id, review_id)), "Review deleted")


@router.post("/{review_id}/like", response_model=ApiResponse[None])
def like_review(
    review_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).like(user.id, review_id)
    return ok(message="Review liked")


@router.delete("/{review_id}/like", response_model=ApiResponse[None])
def unlike_review(
    review_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).unlike(user.id, review_id)
    return ok(message="Review like removed")
