#  -----------------------------------------------------------------------------
#  Copyright (c) 2024 Bud Ecosystem Inc.
#  #
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#  #
#      http://www.apache.org/licenses/LICENSE-2.0
#  #
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
#  -----------------------------------------------------------------------------

"""Main entry point for the health check exporter."""

import os
import signal
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from healthcheck_exporter.__about__ import __version__
from healthcheck_exporter.cluster.kubernetes import KubernetesHandler
from healthcheck_exporter.collector import HealthCheckOrchestrator, build_registry
from healthcheck_exporter.commons.config import AppConfig, app_settings
from healthcheck_exporter.commons.exceptions import KubernetesException
from healthcheck_exporter.commons.observability import configure_structlog, get_logger
from healthcheck_exporter.probe.client import ProbeClient


logger = get_logger(__name__)

LANDING_PAGE = """<html>
<head><title>Health Check Exporter</title></head>
<body>
<h1>Health Check Exporter</h1>
<p><a href='{telemetry_path}'>Metrics</a></p>
</body>
</html>"""


def create_orchestrator(settings: AppConfig) -> HealthCheckOrchestrator:
    """Build the orchestrator against the configured cluster.

    Raises:
        KubernetesException: If the cluster client cannot be configured.
    """
    kubernetes_handler = KubernetesHandler(kubeconfig=settings.kubeconfig)
    return HealthCheckOrchestrator(
        kubernetes_handler,
        probe_client_factory=lambda: ProbeClient(timeout=settings.probe_timeout, verify_ssl=settings.validate_certs),
        container_name_label=settings.container_name_label,
    )


def request_shutdown() -> None:
    """Ask the server to stop so the process gets restarted with a fresh client."""
    os.kill(os.getpid(), signal.SIGTERM)


def create_app(
    orchestrator: Optional[HealthCheckOrchestrator] = None, settings: Optional[AppConfig] = None
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or app_settings
    orchestrator = orchestrator or create_orchestrator(settings)
    registry = build_registry(orchestrator)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        logger.info(f"Starting {settings.name} v{__version__}")
        logger.info(f"Serving metrics on {settings.telemetry_path}, probe timeout {settings.probe_timeout}s")
        yield
        logger.info(f"Shutting down {settings.name}")

    app = FastAPI(
        title="Health Check Exporter",
        description=settings.description,
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )

    @app.exception_handler(KubernetesException)
    async def kubernetes_exception_handler(request: Request, exc: KubernetesException) -> PlainTextResponse:
        """Fail the scrape and, if configured, stop the process."""
        logger.critical("Pod enumeration failed, metrics are unavailable", error=exc.message)
        if settings.exit_on_cluster_error:
            request_shutdown()
        return PlainTextResponse(f"{exc.message}\n", status_code=503)

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    def index() -> str:
        return LANDING_PAGE.format(telemetry_path=settings.telemetry_path)

    # Sync handler: collection blocks, so it runs in the threadpool.
    @app.get(settings.telemetry_path, include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    return app


if __name__ == "__main__":
    import uvicorn

    configure_structlog()
    uvicorn.run(
        create_app(),
        host=app_settings.listen_host,
        port=app_settings.listen_port,
    )
