# bookstore/api/routers/comments.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookstore.api.deps import CurrentUser, get_current_user
from bookstore.data.database import get_db
from bookstore.domain.schemas import (
    ApiResponse,
    CommentChangeOut,
    CommentIn,
    CommentOut,
    CommentUpdateIn,
    ok,
)
from bookstore.services.comment_service import CommentService

router = APIRouter(prefix="/comments", tags=["comments"])


def get_service(db: Session):
    return CommentService(db)


def _change(comment) -> CommentChangeOut:
    return CommentChangeOut(
        comment_id=comment.id,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        deleted_at=comment.deleted_at,
    )


@router.get("/reviews/{review_id}", response_model=ApiResponse[List[CommentOut]])
def list_comments(review_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    return ok([CommentOut.model_validate(c) for c in svc.list_for_review(review_id)])


@router.post("/reviews/{review_id}", response_model=ApiResponse[CommentChangeOut], status_code=201)
def create_comment(
    review_id: int,
    payload: CommentIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    comment = svc.create(user.id, review_id, payload.content, payload.parent_id)
    return ok(_change(comment), "Comment created")


@router.patch("/{comment_id}", response_model=ApiResponse[CommentChangeOut])
def update_comment(
    comment_id: int,
    payload: CommentUpdateIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(_change(svc.update(user.id, comment_id, payload.content)), "Comment updated")


@router.delete("/{comment_id}", response_model=ApiResponse[CommentChangeOut])
def delete_comment(
    comment_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return ok(_change(svc.delete(user.id, comment_id)), "Comment deleted")


@router.post("/{comment_id}/like", response_model=ApiResponse[None])
def like_comment(
    comment_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).like(user.id, comment_id)
    return ok(message="Comment liked")


@router.delete("/{comment_id}/like", response_model=ApiResponse[None])
def unlike_comment(
    comment_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).unlike(user.id, comment_id)
    return ok(message="Comment like removed")
