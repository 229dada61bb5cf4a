# bookstore/api/routers/stats.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookstore.api.deps import CurrentUser, get_current_admin
from bookstore.data.database import get_db
from bookstore.domain.schemas import ApiResponse, DailyStatsOut, TopBooksOut, ok
from bookstore.services.stats_service import StatsService

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/top-books", response_model=ApiResponse[TopBooksOut])
def top_books(
    limit: int | None = Query(None),
    metric: str | None = Query(None),
    admin: CurrentUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    svc = StatsService(db)
    return ok(TopBooksOut.model_validate(svc.top_books(limit, metric), from_attributes=True))


@router.get("/daily", response_model=ApiResponse[DailyStatsOut])
def daily(
    days: int | None = Query(None),
    admin: CurrentUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    svc = StatsService(db)
    return ok(DailyStatsOut.model_validate(svc.daily(days)))
