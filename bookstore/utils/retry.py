# bookstore/utils/retry.py
from sqlalchemy.exc import IntegrityError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception

from bookstore.utils.settings import CART_CREATE_ATTEMPTS

# unique_violation w postgresie
_PG_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: BaseException) -> bool:
    """Tylko konflikt unikalnego klucza; FK, NOT NULL i CHECK nie znikna po ponowieniu."""
    if not isinstance(exc, IntegrityError):
        return False
    orig = exc.orig
    pgcode = getattr(orig, "pgcode", None)
    if pgcode is not None:
        return pgcode == _PG_UNIQUE_VIOLATION
    return "UNIQUE constraint failed" in str(orig)


def conflict_retry():
    """Ponawia operacje write-then-check, ktora przegrala wyscig na unikalnym indeksie."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(CART_CREATE_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception(_is_unique_violation),
    )
