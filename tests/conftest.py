"""Shared fixtures for the health check exporter tests."""

import asyncio
from typing import Any, Dict, List, Optional, Union

import pytest
from kubernetes.client import (
    V1Container,
    V1ExecAction,
    V1ContainerPort,
    V1HTTPGetAction,
    V1ObjectMeta,
    V1Pod,
    V1PodSpec,
    V1PodStatus,
    V1Probe,
)

from healthcheck_exporter.commons.constants import FAILED_PROBE_VALUE
from healthcheck_exporter.probe.schemas import ProbeResult, ProbeTarget


def make_pod(
    name: str,
    namespace: str = "default",
    ip: Optional[str] = "10.0.0.1",
    labels: Optional[Dict[str, str]] = None,
    port: Union[int, str, None] = 8080,
    path: Optional[str] = "/healthz",
    scheme: Optional[str] = None,
    with_container: bool = True,
    container_ports: Optional[List[V1ContainerPort]] = None,
    exec_probe: bool = False,
) -> V1Pod:
    """Build a pod record the way the cluster API returns it.

    ``port=None`` produces a container without a liveness probe.
    """
    containers = []
    if with_container:
        liveness_probe = None
        if exec_probe:
            liveness_probe = V1Probe(_exec=V1ExecAction(command=["true"]))
        elif port is not None:
            liveness_probe = V1Probe(http_get=V1HTTPGetAction(port=port, path=path, scheme=scheme))
        containers.append(
            V1Container(name="main", image="busybox", liveness_probe=liveness_probe, ports=container_ports)
        )

    return V1Pod(
        metadata=V1ObjectMeta(name=name, namespace=namespace, labels=labels),
        spec=V1PodSpec(containers=containers),
        status=V1PodStatus(pod_ip=ip),
    )


@pytest.fixture
def pod_factory():
    """Expose make_pod as a fixture."""
    return make_pod


class FakeKubernetesHandler:
    """In-memory stand-in for KubernetesHandler."""

    def __init__(self, pods: Optional[List[V1Pod]] = None, error: Optional[Exception] = None):
        self.pods = pods or []
        self.error = error
        self.calls = 0

    def list_pods(self) -> List[V1Pod]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.pods)


class FakeProbeClient:
    """Probe client returning canned durations keyed by pod name."""

    def __init__(self, durations: Optional[Dict[str, float]] = None, delay: float = 0.0, default: float = 1.5):
        self.durations = durations or {}
        self.delay = delay
        self.default = default
        self.probed: List[ProbeTarget] = []
        self.entered = False
        self.exited = False

    async def __aenter__(self) -> "FakeProbeClient":
        self.entered = True
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.exited = True

    async def probe(self, target: ProbeTarget) -> ProbeResult:
        self.probed.append(target)
        if self.delay:
            await asyncio.sleep(self.delay)
        duration = self.durations.get(target.pod_name, self.default)
        return ProbeResult(target=target, duration_ms=duration, observed_at=0.0)


@pytest.fixture
def fake_handler_cls():
    return FakeKubernetesHandler


@pytest.fixture
def fake_probe_client_cls():
    return FakeProbeClient


@pytest.fixture
def failed_value() -> float:
    return FAILED_PROBE_VALUE
