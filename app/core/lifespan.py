import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from app.history.db import PersistenceFailure, init_db, purge_old_records

logger = logging.getLogger(__name__)

PURGE_INTERVAL_SECONDS = 3600


@asynccontextmanager
async def lifespan(app):
    try:
        init_db()
        purge_old_records()
    except PersistenceFailure as exc:
        logger.warning("history_init_failed: %s", exc)

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = purge_old_records()
                if deleted:
                    logger.info("history_retention_purge deleted=%s", deleted)
            except PersistenceFailure as exc:
                logger.warning("history_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=PURGE_INTERVAL_SECONDS)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
