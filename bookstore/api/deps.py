# bookstore/api/deps.py
from dataclasses import dataclass

from fastapi import Depends, Query, Request

from bookstore.domain.enums import UserRole
from bookstore.domain.errors import ForbiddenError, UnauthorizedError
from bookstore.utils.paging import PageRequest
from bookstore.utils.settings import AUTH_USER_ID_HEADER, AUTH_USER_ROLE_HEADER


@dataclass(frozen=True)
class CurrentUser:
    id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def get_current_user(request: Request) -> CurrentUser:
    """Tozsamosc z naglowkow ustawianych przez gateway (bez weryfikacji tokenu)."""
    raw_id = request.headers.get(AUTH_USER_ID_HEADER)
    raw_role = request.headers.get(AUTH_USER_ROLE_HEADER, UserRole.CUSTOMER.value)

    try:
        user_id = int(raw_id)
    except (TypeError, ValueError):
        raise UnauthorizedError("Authentication required")
    if user_id <= 0:
        raise UnauthorizedError("Authentication required")

    try:
        role = UserRole(raw_role.upper())
    except ValueError:
        raise UnauthorizedError("Unknown role", {"role": raw_role})

    return CurrentUser(id=user_id, role=role)


def get_current_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user


def page_params(
    page: int | None = Query(None, description="1-based"),
    size: int | None = Query(None),
    sort: str | None = Query(None, description="field,ASC|DESC"),
) -> PageRequest:
    return PageRequest.of(page, size, sort)
