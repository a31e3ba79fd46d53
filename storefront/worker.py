import logging
from typing import Any

from arq import cron

from storefront.core.config import settings
from storefront.core.database import SessionLocal
from storefront.repositories.idempotency_repository import IdempotencyRepository
from storefront.repositories.refresh_token_repository import RefreshTokenRepository
from storefront.tasks import redis_settings

logger = logging.getLogger(__name__)


async def purge_idempotency_records_task(ctx: dict[str, Any]) -> int:
    """Background task: drop idempotency records older than the replay window.

    Runs hourly.
    """
    db = SessionLocal()
    try:
        repo = IdempotencyRepository(db)
        count = repo.delete_expired(max_age_hours=settings.IDEMPOTENCY_TTL_HOURS)
        if count > 0:
            logger.info("Purged %d idempotency records", count)
        return count
    finally:
        db.close()


async def purge_refresh_tokens_task(ctx: dict[str, Any]) -> int:
    """Background task: delete expired or revoked refresh tokens.

    Runs daily.
    """
    db = SessionLocal()
    try:
        repo = RefreshTokenRepository(db)
        count = repo.delete_expired()
        if count > 0:
            logger.info("Purged %d refresh tokens", count)
        return count
    finally:
        db.close()


class WorkerSettings:
    functions = [
        purge_idempotency_records_task,
        purge_refresh_tokens_task,
    ]
    cron_jobs = [
        cron(purge_idempotency_records_task, minute={0}),  # hourly
        cron(purge_refresh_tokens_task, hour=3, minute=0),  # daily at 03:00
    ]
    redis_settings = redis_settings
