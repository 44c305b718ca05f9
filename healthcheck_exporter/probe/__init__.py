"""Probe targets, derivation from pod records and the HTTP probe client."""

from .client import ProbeClient
from .schemas import HealthCheckSample, ProbeResult, ProbeTarget
from .selector import container_name_from_labels, derive_probe_target, select_probe_targets


__all__ = [
    "HealthCheckSample",
    "ProbeClient",
    "ProbeResult",
    "ProbeTarget",
    "container_name_from_labels",
    "derive_probe_target",
    "select_probe_targets",
]
