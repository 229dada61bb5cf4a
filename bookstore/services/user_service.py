# bookstore/services/user_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from bookstore.data.database import transaction
from bookstore.data.models.user import UserModel
from bookstore.domain.errors import NotFoundError, ValidationFailedError
from bookstore.repos.user_repo import SORT_COLUMNS, UserFilter, UserRepo
from bookstore.utils.logging import get_logger
from bookstore.utils.paging import PageRequest, page_payload, parse_sort

logger = get_logger(__name__)

NAME_MAX_LENGTH = 50
PHONE_MAX_LENGTH = 20


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def _get_live_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user or user.is_deleted:
            raise NotFoundError("User not found", {"userId": user_id})
        return user

    def get_me(self, user_id: int) -> UserModel:
        return self._get_live_user(user_id)

    def update_me(self, user_id: int, name: str | None = None, phone: str | None = None) -> UserModel:
        if name is None and phone is None:
            raise ValidationFailedError("Nothing to update")
        if name is not None:
            name = name.strip()
            if not 1 <= len(name) <= NAME_MAX_LENGTH:
                raise ValidationFailedError(f"name must be 1-{NAME_MAX_LENGTH} characters")
        if phone is not None and len(phone) > PHONE_MAX_LENGTH:
            raise ValidationFailedError(f"phone must be at most {PHONE_MAX_LENGTH} characters")

        with transaction(self.db):
            user = self._get_live_user(user_id)
            if name is not None:
                user.name = name
            if phone is not None:
                user.phone = phone
            self.db.flush()

        logger.info(f"User {user_id} updated own profile")
        return user

    def _soft_delete(self, user_id: int) -> UserModel:
        with transaction(self.db):
            user = self.repo.get_user(user_id)
            if not user:
                raise NotFoundError("User not found", {"userId": user_id})

            if user.is_deleted:
                logger.debug(f"User {user_id} already deleted")
                return user

            user.mark_deleted()
            revoked = self.repo.revoke_refresh_tokens(user_id)

        logger.info(f"User {user_id} soft-deleted, {revoked} refresh tokens revoked")
        return user

    def delete_me(self, user_id: int) -> UserModel:
        return self._soft_delete(user_id)

    # --- admin ---
    def list_users(self, f: UserFilter, request: PageRequest) -> Dict[str, Any]:
        sort = parse_sort(request.sort, tuple(SORT_COLUMNS), "createdAt")
        total = self.repo.count_users(f)
        users = self.repo.list_users(f, sort, request.offset, request.size)
        return page_payload(users, request, total, sort)

    def deactivate_user(self, admin_id: int, user_id: int) -> UserModel:
        user = self._soft_delete(user_id)
        logger.info(f"Admin {admin_id} deactivated user {user_id}")
        return user
