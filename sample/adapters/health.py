# sample/adapters/health.py
import asyncio
from typing import Awaitable, Callable, Dict

import redis.asyncio as redis
import structlog

from sample.adapters.persistence.database import Database
from sample.shared.config import Settings
from sample.shared.telemetry import get_tracer

logger = structlog.get_logger(__name__)
tracer = get_tracer(__name__)

HealthCheck = Callable[[], Awaitable[bool]]


async def ping_redis(url: str) -> bool:
    client = redis.from_url(url)
    try:
        return bool(await client.ping())
    finally:
        await client.aclose()


class HealthCheckService:
    """
    Readiness checks keyed by component name.

    Every check runs concurrently under its own timeout; a check that raises,
    times out or returns False reports "down".
    """

    def __init__(self, checks: Dict[str, HealthCheck], timeout: float = 5.0):
        self.checks = dict(checks)
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings, database: Database) -> "HealthCheckService":
        checks: Dict[str, HealthCheck] = {"database": database.ping}
        if settings.REDIS_URL:
            checks["redis"] = lambda: ping_redis(settings.REDIS_URL)
        return cls(checks, timeout=settings.HEALTH_CHECK_TIMEOUT_SEC)

    async def check_all(self) -> Dict[str, str]:
        names = list(self.checks)
        results = await asyncio.gather(*(self._run(name) for name in names))
        return dict(zip(names, results))

    async def _run(self, name: str) -> str:
        with tracer.start_as_current_span(f"health_check.{name}"):
            try:
                healthy = await asyncio.wait_for(self.checks[name](), timeout=self.timeout)
            except asyncio.TimeoutError:
                logger.error("health_check_failed", component=name, error="timeout")
                return "down"
            except Exception as e:
                logger.error("health_check_failed", component=name, error=str(e))
                return "down"
        return "up" if healthy else "down"
