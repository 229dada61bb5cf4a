# bookstore/data/soft_delete.py
from datetime import datetime

from sqlalchemy import Column, DateTime, select
from sqlalchemy.sql import Select

from bookstore.data.database import utcnow


class SoftDeleteMixin:
    """
    Tabele z miekkim usuwaniem. Zapytania o "zywe" wiersze zaczynaja sie od
    `Model.live()` albo dokladaja `Model.is_live()` do where.
    """

    deleted_at = Column(DateTime(timezone=True), nullable=True)

    @classmethod
    def is_live(cls):
        return cls.deleted_at.is_(None)

    @classmethod
    def live(cls) -> Select:
        return select(cls).where(cls.is_live())

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def mark_deleted(self, at: datetime | None = None) -> None:
        self.deleted_at = at or utcnow()
