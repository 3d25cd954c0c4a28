from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from app.config import get_settings
from app.exceptions import TransactionConflictError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_transaction(
    session: AsyncSession,
    work: Callable[[AsyncSession], Awaitable[T]],
    *,
    max_attempts: int | None = None,
) -> T:
    """Run ``work`` in one transaction and commit, re-running it on write conflicts.

    ``work`` must do all of its reads through ``session`` so that a retry sees
    fresh state; rollback expires every loaded instance. Any other exception
    rolls the transaction back and propagates unchanged, so no partial effect
    is ever committed.
    """
    attempts = max_attempts if max_attempts is not None else get_settings().transaction_max_attempts
    if attempts < 1:
        msg = "max_attempts must be at least 1"
        raise ValueError(msg)

    for attempt in range(1, attempts + 1):
        try:
            result = await work(session)
            await session.commit()
        except TransactionConflictError:
            await session.rollback()
            if attempt == attempts:
                logger.error("Transaction conflict persisted after %d attempts", attempts)
                raise
            logger.warning("Transaction conflict on attempt %d/%d, retrying", attempt, attempts)
            continue
        except Exception:
            await session.rollback()
            raise
        return result

    # The loop either returns or raises on its last attempt.
    raise AssertionError("unreachable")
