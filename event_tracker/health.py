"""
Health checks for liveness and readiness probes.
"""
from datetime import datetime, timezone
from typing import Dict, Any
import psutil
from .logging import get_logger
from .services.event_service import EventService

logger = get_logger()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class HealthChecker:
    """
    Health checker for the event tracker service.

    Provides:
    - Liveness checks (is the service running?)
    - Readiness checks (can the service handle traffic?)
    """

    def __init__(self, event_service: EventService, service_name: str = "event-tracker", version: str = "0.1.0"):
        self.event_service = event_service
        self.service_name = service_name
        self.version = version

    def liveness(self) -> Dict[str, Any]:
        """
        Liveness check - basic health check.

        Returns:
            dict: Health status with service info and timestamp
        """
        return {
            "status": "ok",
            "service": self.service_name,
            "version": self.version,
            "timestamp": _now(),
        }

    def readiness(self) -> Dict[str, Any]:
        """
        Readiness check.

        Checks:
        - Event store health
        - Memory availability (the store keeps everything in memory)

        Returns:
            dict: Readiness status with detailed check results
        """
        checks = {
            "store": self._check_store(),
            "memory": self._check_memory(),
        }
        ready = all(check["status"] != "error" for check in checks.values())

        return {
            "status": "ready" if ready else "not_ready",
            "service": self.service_name,
            "version": self.version,
            "timestamp": _now(),
            "checks": checks,
        }

    def _check_store(self) -> Dict[str, Any]:
        try:
            healthy = self.event_service.health_check()
        except Exception as e:
            logger.warning("store_health_check_failed", error=str(e))
            return {"status": "error", "error": str(e)}

        if not healthy:
            return {"status": "error", "error": "store reported unhealthy"}
        return {"status": "ok", "events": self.event_service.store.count()}

    def _check_memory(self, threshold_mb: float = 50.0) -> Dict[str, Any]:
        """
        Check available memory.

        Args:
            threshold_mb: Minimum available memory in MB (default: 50.0)

        Returns:
            dict: Memory health check result
        """
        try:
            memory = psutil.virtual_memory()
            available_mb = memory.available / (1024**2)

            if available_mb < threshold_mb:
                status = "error"
            elif available_mb < threshold_mb * 2:
                status = "warning"
            else:
                status = "ok"

            return {
                "status": status,
                "available_mb": round(available_mb, 2),
                "total_mb": round(memory.total / (1024**2), 2),
                "used_percent": memory.percent,
            }

        except Exception as e:
            logger.warning("memory_health_check_failed", error=str(e))
            return {
                "status": "error",
                "error": str(e),
            }
