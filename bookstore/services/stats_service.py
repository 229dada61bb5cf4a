# bookstore/services/stats_service.py
from datetime import datetime, time, timedelta
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookstore.data.database import utcnow
from bookstore.data.models.book import BookModel
from bookstore.data.models.order import OrderModel
from bookstore.data.models.review import ReviewModel
from bookstore.domain.errors import ValidationFailedError
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)

TOP_METRICS = {
    "reviewCount": (BookModel.review_count, BookModel.avg_rating),
    "avgRating": (BookModel.avg_rating, BookModel.review_count),
}
TOP_LIMIT_MAX = 50
DAILY_DAYS_MAX = 30


class StatsService:
    """Raporty dla administratora, tylko odczyt."""

    def __init__(self, db: Session):
        self.db = db

    def top_books(self, limit: int | None = None, metric: str | None = None) -> Dict[str, Any]:
        metric = metric or "reviewCount"
        if metric not in TOP_METRICS:
            raise ValidationFailedError(
                "metric must be one of: " + ", ".join(TOP_METRICS), {"metric": metric}
            )
        limit = min(max(limit or 10, 1), TOP_LIMIT_MAX)

        primary, secondary = TOP_METRICS[metric]
        books = self.db.execute(
            BookModel.live()
            .order_by(primary.desc(), secondary.desc(), BookModel.id.desc())
            .limit(limit)
        ).scalars().all()

        return {"metric": metric, "limit": limit, "items": list(books)}

    def _per_day(self, column, since: datetime) -> List[Dict[str, Any]]:
        day = func.date(column)
        rows = self.db.execute(
            select(day, func.count()).where(column >= since).group_by(day).order_by(day)
        ).all()
        # postgres zwraca date, sqlite tekst
        return [{"day": str(d), "count": c} for d, c in rows]

    def daily(self, days: int | None = None) -> Dict[str, Any]:
        days = min(max(days or 7, 1), DAILY_DAYS_MAX)
        today = utcnow().date()
        since = datetime.combine(today - timedelta(days=days - 1), time.min, tzinfo=utcnow().tzinfo)

        result = {
            "days": days,
            "since": since,
            "orders": self._per_day(OrderModel.created_at, since),
            "reviews": self._per_day(ReviewModel.created_at, since),
        }
        logger.debug(f"Daily stats for {days} days since {since.isoformat()}")
        return result
