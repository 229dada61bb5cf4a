# bookstore/repos/user_repo.py
from dataclasses import dataclass
from typing import List

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from bookstore.data.models.user import RefreshTokenModel, UserModel
from bookstore.domain.enums import UserRole
from bookstore.utils.paging import Sort

SORT_COLUMNS = {
    "id": UserModel.id,
    "email": UserModel.email,
    "name": UserModel.name,
    "role": UserModel.role,
    "createdAt": UserModel.created_at,
    "updatedAt": UserModel.updated_at,
}


@dataclass(frozen=True)
class UserFilter:
    keyword: str | None = None
    role: UserRole | None = None
    include_deleted: bool = False


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.flush()
        return user

    def _filtered(self, f: UserFilter):
        stmt = select(UserModel) if f.include_deleted else UserModel.live()
        if f.keyword:
            pattern = f"%{f.keyword.lower()}%"
            stmt = stmt.where(
                or_(func.lower(UserModel.email).like(pattern), func.lower(UserModel.name).like(pattern))
            )
        if f.role is not None:
            stmt = stmt.where(UserModel.role == f.role)
        return stmt

    def count_users(self, f: UserFilter) -> int:
        return self.db.execute(
            select(func.count()).select_from(self._filtered(f).subquery())
        ).scalar_one()

    def list_users(self, f: UserFilter, sort: Sort, offset: int, limit: int) -> List[UserModel]:
        column = SORT_COLUMNS[sort.field]
        order = column.desc() if sort.descending else column.asc()
        return list(
            self.db.execute(
                self._filtered(f).order_by(order, UserModel.id.desc()).offset(offset).limit(limit)
            ).scalars().all()
        )

    def revoke_refresh_tokens(self, user_id: int) -> int:
        result = self.db.execute(
            update(RefreshTokenModel)
            .where(RefreshTokenModel.user_id == user_id, RefreshTokenModel.revoked.is_(False))
            .values(revoked=True)
        )
        return result.rowcount
