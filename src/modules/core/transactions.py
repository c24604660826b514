"""Unit-of-work boundary for service-layer commands.

``unit_of_work()`` opens a single ``transaction.atomic`` block that every
repository call inside it joins.  It commits when the block exits
normally and rolls back on *any* exception.  Domain errors propagate
unchanged; store failures are translated into ``TransactionError`` so the
API can tell a transient conflict (retry later) from a fatal one.

``retry_on_conflict`` replays a whole unit of work after a transient
conflict.  Apply it only to operations that re-read all of their inputs
inside the transaction (``confirm_order`` does).
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Iterator, Optional, TypeVar

import structlog
from django.conf import settings
from django.db import DatabaseError, OperationalError, transaction

from modules.core.exceptions import TransactionError

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# PostgreSQL: serialization_failure / deadlock_detected
PG_RETRY_ERRCODES = {"40001", "40P01"}
# MySQL: ER_LOCK_DEADLOCK / ER_LOCK_WAIT_TIMEOUT
MYSQL_RETRY_ERRNOS = {1213, 1205}
RETRY_MESSAGES = (
    "deadlock",
    "could not serialize access",
    "database is locked",
    "lock wait timeout",
)


def _pgcode_from(exc: BaseException) -> Optional[str]:
    return getattr(exc, "pgcode", None) or getattr(
        getattr(exc, "__cause__", None), "pgcode", None
    )


def is_retryable(exc: BaseException) -> bool:
    """Return ``True`` when *exc* signals a transient concurrency conflict."""
    code = _pgcode_from(exc)
    if code and code in PG_RETRY_ERRCODES:
        return True
    args = getattr(exc, "args", ())
    if args and isinstance(args[0], int) and args[0] in MYSQL_RETRY_ERRNOS:
        return True
    msg = str(exc).lower()
    return any(marker in msg for marker in RETRY_MESSAGES)


@contextmanager
def unit_of_work(using: Optional[str] = None) -> Iterator[None]:
    """Run the enclosed block as one atomic transaction."""
    try:
        with transaction.atomic(using=using):
            yield
    except (OperationalError, DatabaseError) as exc:
        retryable = is_retryable(exc)
        logger.warning(
            "transaction.failed",
            error=str(exc),
            retryable=retryable,
        )
        raise TransactionError(str(exc), retryable=retryable) from exc


def retry_on_conflict(
    max_attempts: Optional[int] = None, backoff: float = 0.05
) -> Callable[[F], F]:
    """Retry the decorated unit of work on retryable ``TransactionError``.

    Must wrap the *outermost* transaction: retrying inside an enclosing
    ``atomic`` block would replay on a connection that is already broken.
    """

    def deco(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempts = max_attempts or getattr(settings, "TRANSACTION_MAX_RETRIES", 3)
            attempt = 0
            while True:
                attempt += 1
                try:
                    return fn(*args, **kwargs)
                except TransactionError as exc:
                    in_outer_tx = transaction.get_connection().in_atomic_block
                    if not exc.retryable or attempt >= attempts or in_outer_tx:
                        raise
                    logger.info(
                        "transaction.retrying",
                        operation=fn.__qualname__,
                        attempt=attempt,
                    )
                    time.sleep(backoff * attempt)

        return wrapper  # type: ignore[return-value]

    return deco
