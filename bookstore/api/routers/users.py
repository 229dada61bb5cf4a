# bookstore/api/routers/users.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookstore.api.deps import CurrentUser, get_current_admin, get_current_user, page_params
from bookstore.data.database import get_db
from bookstore.domain.enums import UserRole
from bookstore.domain.schemas import ApiResponse, Page, UserOut, UserUpdateIn, ok
from bookstore.repos.user_repo import UserFilter
from bookstore.services.user_service import UserService
from bookstore.utils.paging import PageRequest

router = APIRouter(prefix="/users", tags=["users"])


def get_service(db: Session):
    return UserService(db)


@router.get("/me", response_model=ApiResponse[UserOut])
def get_me(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    svc = get_service(db)
    return ok(UserOut.model_validate(svc.get_me(user.id)))


@router.patch("/me", response_model=ApiResponse[UserOut])
def update_me(
    payload: UserUpdateIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    updated = svc.update_me(user.id, name=payload.name, phone=payload.phone)
    return ok(UserOut.model_validate(updated), "Profile updated")


@router.delete("/me", response_model=ApiResponse[UserOut])
def delete_me(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    svc = get_service(db)
    return ok(UserOut.model_validate(svc.delete_me(user.id)), "Account deleted")


@router.get("", response_model=ApiResponse[Page[UserOut]])
def list_users(
    keyword: str | None = Query(None),
    role: UserRole | None = Query(None),
    include_deleted: bool = Query(False, alias="includeDeleted"),
    request: PageRequest = Depends(page_params),
    admin: CurrentUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Lista uzytkownikow dla administratora."""
    svc = get_service(db)
    f = UserFilter(keyword=keyword, role=role, include_deleted=include_deleted)
    page = svc.list_users(f, request)
    return ok(Page[UserOut].model_validate(page, from_attributes=True))


@router.patch("/{user_id}/deactivate", response_model=ApiResponse[UserOut])
def deactivate_user(
    user_id: int,
    admin: CurrentUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    user = svc.deactivate_user(admin.id, user_id)
    return ok(UserOut.model_validate(user), "User deactivated")
