"""Health check endpoints."""

import platform
from datetime import datetime

import psutil
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.services.healthcheck import HealthChecker, HealthStatus, get_health_checker

router = APIRouter()

CRITICAL_CHECKS = ["api", "supabase"]


@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/health/detailed")
async def detailed_health():
    """Health check with host resource usage."""
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage("/")

    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "system": {
            "platform": platform.system(),
            "machine": platform.machine(),
            "python": platform.python_version(),
        },
        "cpu": {
            "percent": psutil.cpu_percent(interval=0.1),
            "cores": psutil.cpu_count(),
        },
        "memory": {
            "used_gb": round(memory.used / (1024**3), 2),
            "total_gb": round(memory.total / (1024**3), 2),
            "percent": memory.percent,
        },
        "disk": {
            "used_gb": round(disk.used / (1024**3), 2),
            "total_gb": round(disk.total / (1024**3), 2),
            "percent": disk.percent,
        },
    }


@router.get("/health/services")
async def services_health(checker: HealthChecker = Depends(get_health_checker)):
    """
    Check the API, the Supabase database and the ingredient category seed data.
    """
    report = await checker.run_all_checks()
    return report.to_dict()


@router.get("/health/ready")
async def readiness_check(checker: HealthChecker = Depends(get_health_checker)):
    """
    Readiness probe.

    Returns 503 when the API or the database is down.
    """
    report = await checker.run_all_checks()

    critical_healthy = all(
        c.status == HealthStatus.HEALTHY
        for c in report.checks
        if c.name in CRITICAL_CHECKS
    )

    if critical_healthy:
        return {"ready": True, "status": report.status.value}
    return JSONResponse(status_code=503, content={"ready": False, "status": report.status.value})


@router.get("/health/live")
async def liveness_check():
    """Liveness probe: if we can respond, we're alive."""
    return {"live": True, "timestamp": datetime.utcnow().isoformat()}
