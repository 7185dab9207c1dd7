"""ARQ worker configuration."""
from arq.connections import RedisSettings
from arq.cron import cron

from app.config import settings
from app.utils.logger import logger
from app.workers.tasks import purge_sessions


async def startup(ctx):
    """Worker startup hook."""
    logger.info("ARQ worker starting up...")


async def shutdown(ctx):
    """Worker shutdown hook."""
    logger.info("ARQ worker shutting down...")


class WorkerSettings:
    """ARQ worker settings (run with `arq app.workers.config.WorkerSettings`)."""

    functions = [purge_sessions]

    cron_jobs = [
        # Daily at 03:00 UTC
        cron(purge_sessions, hour={3}, minute={0}),
    ]

    on_startup = startup
    on_shutdown = shutdown

    redis_settings = RedisSettings.from_dsn(settings.redis_url)

    max_jobs = 2
    job_timeout = 300
    keep_result = 3600
