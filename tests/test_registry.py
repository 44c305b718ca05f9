"""Tests for the Prometheus collector built on the orchestrator."""

from unittest.mock import Mock

import pytest
from prometheus_client import generate_latest

from healthcheck_exporter.collector.registry import HealthCheckCollector, build_registry
from healthcheck_exporter.commons.constants import (
    HEALTH_CHECK_METRIC_HELP,
    HEALTH_CHECK_METRIC_LABELS,
    HEALTH_CHECK_METRIC_NAME,
)
from healthcheck_exporter.commons.exceptions import KubernetesException
from healthcheck_exporter.probe.schemas import HealthCheckSample


@pytest.fixture
def samples():
    return [
        HealthCheckSample(namespace="default", container_name="svcA", pod_name="a", value=4.25, timestamp=1715059230.25),
        HealthCheckSample(namespace="kube-system", container_name="", pod_name="cilium-mk95x", value=-1, timestamp=1715059230.5),
    ]


@pytest.fixture
def orchestrator(samples):
    orchestrator = Mock()
    orchestrator.collect_cycle.return_value = samples
    return orchestrator


class TestHealthCheckCollector:
    """Test describe and collect."""

    def test_describe_does_not_collect(self, orchestrator):
        collector = HealthCheckCollector(orchestrator)

        (family,) = list(collector.describe())

        assert family.name == HEALTH_CHECK_METRIC_NAME
        assert family.documentation == HEALTH_CHECK_METRIC_HELP
        assert family.type == "gauge"
        assert family.samples == []
        orchestrator.collect_cycle.assert_not_called()

    def test_collect_forwards_every_sample(self, orchestrator):
        collector = HealthCheckCollector(orchestrator)

        (family,) = list(collector.collect())

        assert len(family.samples) == 2
        first = family.samples[0]
        assert first.name == HEALTH_CHECK_METRIC_NAME
        assert first.labels == dict(zip(HEALTH_CHECK_METRIC_LABELS, ("default", "svcA", "a")))
        assert first.value == 4.25
        assert float(first.timestamp) == pytest.approx(1715059230.25)
        assert family.samples[1].value == -1
        orchestrator.collect_cycle.assert_called_once()

    def test_collect_with_no_samples(self):
        orchestrator = Mock()
        orchestrator.collect_cycle.return_value = []

        (family,) = list(HealthCheckCollector(orchestrator).collect())

        assert family.name == HEALTH_CHECK_METRIC_NAME
        assert family.samples == []


class TestRegistry:
    """Test the exposition produced through the registry."""

    def test_registration_does_not_collect(self, orchestrator):
        build_registry(orchestrator)
        orchestrator.collect_cycle.assert_not_called()

    def test_exposition_text(self, orchestrator):
        output = generate_latest(build_registry(orchestrator)).decode()

        assert f"# HELP {HEALTH_CHECK_METRIC_NAME} {HEALTH_CHECK_METRIC_HELP}" in output
        assert f"# TYPE {HEALTH_CHECK_METRIC_NAME} gauge" in output
        assert (
            f'{HEALTH_CHECK_METRIC_NAME}{{container_name="svcA",namespace="default",pod_name="a"}} 4.25 1715059230250'
            in output
        )
        assert (
            f'{HEALTH_CHECK_METRIC_NAME}{{container_name="",namespace="kube-system",pod_name="cilium-mk95x"}} -1.0 1715059230500'
            in output
        )

    def test_exposition_with_empty_pod_list(self):
        orchestrator = Mock()
        orchestrator.collect_cycle.return_value = []

        output = generate_latest(build_registry(orchestrator)).decode()

        lines = [line for line in output.splitlines() if line]
        assert lines == [
            f"# HELP {HEALTH_CHECK_METRIC_NAME} {HEALTH_CHECK_METRIC_HELP}",
            f"# TYPE {HEALTH_CHECK_METRIC_NAME} gauge",
        ]

    def test_fatal_error_fails_the_scrape(self):
        orchestrator = Mock()
        orchestrator.collect_cycle.side_effect = KubernetesException("api unreachable")

        with pytest.raises(KubernetesException):
            generate_latest(build_registry(orchestrator))
