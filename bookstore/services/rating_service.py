# bookstore/services/rating_service.py
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from bookstore.data.models.book import BookModel
from bookstore.repos.review_repo import ReviewRepo
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)

_RATING_STEP = Decimal("0.01")


def recompute_book_rating(db: Session, book_id: int) -> BookModel:
    """
    Przelicza review_count i avg_rating ksiazki z nieusunietych recenzji.

    Wolane wylacznie wewnatrz transakcji, ktora zmienia zbior recenzji
    (create / update / soft delete) - nigdy osobno, inaczej agregat moze
    rozjechac sie z recenzjami.
    """
    count, avg = ReviewRepo(db).rating_aggregate(book_id)

    book = db.get(BookModel, book_id)
    book.review_count = count or 0
    book.avg_rating = (
        Decimal(str(avg)).quantize(_RATING_STEP, rounding=ROUND_HALF_UP) if count else Decimal("0.00")
    )
    db.flush()

    logger.info(f"Book {book_id} rating recomputed: avg={book.avg_rating} count={book.review_count}")
    return book
