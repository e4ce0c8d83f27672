"""ARQ worker configuration."""
from urllib.parse import urlparse

from arq.connections import RedisSettings
from arq.cron import cron

from tocapi.config import get_settings
from tocapi.container import ServiceContainer
from tocapi.utils.logger import logger
from tocapi.workers.tasks import purge_expired_reset_tokens


def parse_redis_url(url: str) -> RedisSettings:
    """Parse Redis URL into RedisSettings."""
    parsed = urlparse(url)
    return RedisSettings(
        host=parsed.hostname or "localhost",
        port=parsed.port or 6379,
        password=parsed.password,
        database=int(parsed.path[1:]) if parsed.path and len(parsed.path) > 1 else 0,
    )


async def startup(ctx):
    """Worker startup hook."""
    logger.info("ARQ worker starting up...")
    ctx["container"] = ServiceContainer(get_settings()).open()


async def shutdown(ctx):
    """Worker shutdown hook."""
    logger.info("ARQ worker shutting down...")
    container = ctx.pop("container", None)
    if container is not None:
        container.close()


class WorkerSettings:
    """ARQ worker settings."""

    functions = [purge_expired_reset_tokens]

    cron_jobs = [
        # Reset codes live 15 minutes, purge on the same cadence
        cron(purge_expired_reset_tokens, minute={0, 15, 30, 45}),
    ]

    on_startup = startup
    on_shutdown = shutdown

    redis_settings = parse_redis_url(get_settings().redis_url)

    max_jobs = 1
    job_timeout = 60
    keep_result = 3600
