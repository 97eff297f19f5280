from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

from ..core.constants import DEFAULT_DB_RETRIES, DEFAULT_DB_RETRY_DELAY_SECONDS
from .extensions import db

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS = (OperationalError, DBAPIError)


@contextmanager
def transaction() -> Iterator[None]:
    """Unit of work: commit when the block finishes, roll back on any error."""
    try:
        yield
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def reset_session() -> None:
    """Drop the session's failed transaction so the next attempt gets a fresh connection."""
    db.session.rollback()


def with_retry(
    fn: Callable[[], T],
    retries: int = DEFAULT_DB_RETRIES,
    route_name: str = "unknown",
    *,
    delay: float = DEFAULT_DB_RETRY_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
    on_retry: Optional[Callable[[], None]] = None,
) -> T:
    """Run ``fn``; retry on database connectivity errors only.

    ``on_retry`` runs before every new attempt, e.g. :func:`reset_session`.
    """
    while True:
        try:
            return fn()
        except RETRYABLE_ERRORS as err:
            logger.warning("Database error in %s: %s", route_name, err)
            if retries <= 0:
                raise
            logger.warning("Retrying database query in %s... %d attempts left", route_name, retries)
            retries -= 1
            if on_retry is not None:
                on_retry()
            sleep(delay)
