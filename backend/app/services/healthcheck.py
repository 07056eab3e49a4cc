"""
Health checks for the meal planner backend.

Checks:
- API responsiveness
- Database connectivity (Supabase)
- Lookup data presence (ingredient categories)
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from supabase import Client

from app.services.supabase import TABLES, get_supabase_client

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass
class CheckResult:
    """Result of a single health check."""
    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0
    details: dict = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.utcnow)


@dataclass
class HealthReport:
    status: HealthStatus
    checks: list[CheckResult]
    timestamp: datetime = field(default_factory=datetime.utcnow)
    version: str = API_VERSION

    @property
    def healthy_count(self) -> int:
        return sum(1 for c in self.checks if c.status == HealthStatus.HEALTHY)

    @property
    def total_count(self) -> int:
        return len(self.checks)

    def check(self, name: str) -> Optional[CheckResult]:
        return next((c for c in self.checks if c.name == name), None)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "version": self.version,
            "timestamp": self.timestamp.isoformat(),
            "summary": f"{self.healthy_count}/{self.total_count} checks passing",
            "checks": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "latency_ms": round(c.latency_ms, 2),
                    "details": c.details,
                }
                for c in self.checks
            ],
        }


def overall_status(results: list[CheckResult]) -> HealthStatus:
    """Healthy only when every check is; unhealthy when the database is down."""
    if all(c.status == HealthStatus.HEALTHY for c in results):
        return HealthStatus.HEALTHY
    if any(c.name == "supabase" and c.status == HealthStatus.UNHEALTHY for c in results):
        return HealthStatus.UNHEALTHY
    return HealthStatus.DEGRADED


class HealthChecker:
    """Runs health checks against the API and its database."""

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    async def run_all_checks(self) -> HealthReport:
        names = ["api", "supabase", "ingredient_categories"]
        checks = await asyncio.gather(
            self.check_api(),
            self.check_supabase(),
            self.check_ingredient_categories(),
            return_exceptions=True,
        )

        results = []
        for name, check in zip(names, checks):
            if isinstance(check, Exception):
                results.append(CheckResult(
                    name=name,
                    status=HealthStatus.UNHEALTHY,
                    message=str(check),
                ))
            else:
                results.append(check)

        return HealthReport(status=overall_status(results), checks=results)

    async def check_api(self) -> CheckResult:
        start = time.time()
        return CheckResult(
            name="api",
            status=HealthStatus.HEALTHY,
            message="API is responsive",
            latency_ms=(time.time() - start) * 1000,
        )

    async def check_supabase(self) -> CheckResult:
        """Check Supabase database connectivity."""
        start = time.time()
        try:
            self.client.table(TABLES["recipes"]).select("id").limit(1).execute()
            return CheckResult(
                name="supabase",
                status=HealthStatus.HEALTHY,
                message="Database connected",
                latency_ms=(time.time() - start) * 1000,
                details={"connected": True},
            )
        except Exception as e:
            logger.warning(f"Supabase health check failed: {e}")
            return CheckResult(
                name="supabase",
                status=HealthStatus.UNHEALTHY,
                message=f"Database error: {str(e)}",
                latency_ms=(time.time() - start) * 1000,
            )

    async def check_ingredient_categories(self) -> CheckResult:
        """Category lookup data is seeded; the app still works without it."""
        start = time.time()
        try:
            result = self.client.table(TABLES["ingredient_categories"]).select("id").execute()
            count = len(result.data or [])
            latency = (time.time() - start) * 1000
            if count:
                return CheckResult(
                    name="ingredient_categories",
                    status=HealthStatus.HEALTHY,
                    message=f"{count} categories loaded",
                    latency_ms=latency,
                    details={"count": count},
                )
            return CheckResult(
                name="ingredient_categories",
                status=HealthStatus.DEGRADED,
                message="No ingredient categories seeded",
                latency_ms=latency,
                details={"count": 0},
            )
        except Exception as e:
            return CheckResult(
                name="ingredient_categories",
                status=HealthStatus.DEGRADED,
                message=str(e),
                latency_ms=(time.time() - start) * 1000,
            )


# Singleton
_health_checker: Optional[HealthChecker] = None


def get_health_checker() -> HealthChecker:
    global _health_checker
    if _health_checker is None:
        _health_checker = HealthChecker()
    return _health_checker
