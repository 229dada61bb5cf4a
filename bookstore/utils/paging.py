# bookstore/utils/paging.py
import math
from dataclasses import dataclass
from typing import Sequence

from bookstore.utils.settings import PAGE_SIZE_DEFAULT, PAGE_SIZE_MAX


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    size: int = PAGE_SIZE_DEFAULT
    sort: str | None = None

    @classmethod
    def of(cls, page: int | None = None, size: int | None = None, sort: str | None = None) -> "PageRequest":
        # wartosci spoza zakresu sa przycinane, nie odrzucane
        page = max(page or 1, 1)
        size = min(max(size or PAGE_SIZE_DEFAULT, 1), PAGE_SIZE_MAX)
        return cls(page=page, size=size, sort=sort)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


@dataclass(frozen=True)
class Sort:
    field: str
    descending: bool

    def label(self) -> str:
        return f"{self.field},{'DESC' if self.descending else 'ASC'}"


def parse_sort(raw: str | None, allowed: Sequence[str], default: str) -> Sort:
    """`field,DIR` -> Sort; nieznane pole wraca do domyslnego, kierunek domyslnie DESC."""
    raw_field, _, raw_dir = (raw or "").partition(",")
    field = raw_field.strip() if raw_field.strip() in allowed else default
    return Sort(field=field, descending=raw_dir.strip().upper() != "ASC")


def page_payload(content: list, request: PageRequest, total: int, sort: Sort | None = None) -> dict:
    return {
        "content": content,
        "page": request.page - 1,
        "size": request.size,
        "total_elements": total,
        "total_pages": math.ceil(total / request.size) if total else 0,
        "sort": sort.label() if sort else None,
    }
