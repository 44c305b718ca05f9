"""Tests for the HTTP surface of the exporter."""

from unittest.mock import Mock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from healthcheck_exporter.commons.config import AppConfig
from healthcheck_exporter.commons.constants import HEALTH_CHECK_METRIC_NAME
from healthcheck_exporter.commons.exceptions import KubernetesException
from healthcheck_exporter.main import create_app
from healthcheck_exporter.probe.schemas import HealthCheckSample


def _orchestrator(samples=None, error=None):
    orchestrator = Mock()
    orchestrator.collect_cycle.return_value = samples or []
    orchestrator.collect_cycle.side_effect = error
    return orchestrator


class TestMetricsEndpoint:
    """Tests for the telemetry path."""

    @pytest.mark.asyncio
    async def test_metrics_exposition(self) -> None:
        sample = HealthCheckSample(namespace="default", container_name="svcA", pod_name="a", value=3.5, timestamp=1.5)
        app = create_app(_orchestrator([sample]), AppConfig(exit_on_cluster_error=False))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert f"# TYPE {HEALTH_CHECK_METRIC_NAME} gauge" in response.text
        assert 'pod_name="a"} 3.5 1500' in response.text

    @pytest.mark.asyncio
    async def test_custom_telemetry_path(self) -> None:
        app = create_app(_orchestrator(), AppConfig(telemetry_path="/probe-metrics", exit_on_cluster_error=False))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/probe-metrics")
            missing = await client.get("/metrics")

        assert response.status_code == 200
        assert f"# HELP {HEALTH_CHECK_METRIC_NAME}" in response.text
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_cluster_failure_fails_the_scrape(self) -> None:
        app = create_app(
            _orchestrator(error=KubernetesException("Found error while listing pods")),
            AppConfig(exit_on_cluster_error=False),
        )

        with patch("healthcheck_exporter.main.request_shutdown") as mock_shutdown:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.get("/metrics")

        assert response.status_code == 503
        assert "Found error while listing pods" in response.text
        mock_shutdown.assert_not_called()

    @pytest.mark.asyncio
    async def test_cluster_failure_requests_shutdown(self) -> None:
        app = create_app(_orchestrator(error=KubernetesException()), AppConfig(exit_on_cluster_error=True))

        with patch("healthcheck_exporter.main.request_shutdown") as mock_shutdown:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.get("/metrics")

        assert response.status_code == 503
        mock_shutdown.assert_called_once()


class TestLandingPage:
    """Tests for the index page."""

    @pytest.mark.asyncio
    async def test_index_links_metrics(self) -> None:
        app = create_app(_orchestrator(), AppConfig(telemetry_path="/probe-metrics"))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/")

        assert response.status_code == 200
        assert "<a href='/probe-metrics'>Metrics</a>" in response.text


class TestCreateApp:
    """Tests for application wiring."""

    def test_client_construction_failure_aborts(self) -> None:
        with patch(
            "healthcheck_exporter.main.KubernetesHandler", side_effect=KubernetesException("Invalid Kubernetes configuration")
        ):
            with pytest.raises(KubernetesException):
                create_app(settings=AppConfig())

    def test_orchestrator_uses_settings(self) -> None:
        settings = AppConfig(probe_timeout=1.5, validate_certs=False, container_name_label="component")
        with patch("healthcheck_exporter.main.KubernetesHandler") as mock_handler:
            from healthcheck_exporter.main import create_orchestrator

            orchestrator = create_orchestrator(settings)

        mock_handler.assert_called_once_with(kubeconfig=None)
        assert orchestrator.container_name_label == "component"
        prober = orchestrator.probe_client_factory()
        assert prober.timeout == 1.5
        assert prober.verify_ssl is False
