"""Collection orchestration and the Prometheus collector built on top of it."""

from .orchestrator import HealthCheckOrchestrator
from .registry import HealthCheckCollector, build_registry


__all__ = ["HealthCheckCollector", "HealthCheckOrchestrator", "build_registry"]
