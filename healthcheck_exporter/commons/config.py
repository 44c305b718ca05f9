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

"""Configuration settings for the health check exporter.

Values are read from the environment (and a local ``.env`` file when present).
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from healthcheck_exporter.__about__ import __version__

from .constants import DEFAULT_CONTAINER_NAME_LABEL, DEFAULT_PROBE_TIMEOUT


load_dotenv()


class AppConfig(BaseSettings):
    """Application configuration for the health check exporter."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    # App Info
    name: str = __version__.split("@")[0]
    version: str = __version__.split("@")[-1]
    description: str = "Exports the latency of pod liveness endpoints as Prometheus gauges"

    # Web
    listen_host: str = Field("0.0.0.0", alias="LISTEN_HOST")
    listen_port: int = Field(8089, alias="LISTEN_PORT", description="Port to listen on for telemetry")
    telemetry_path: str = Field("/metrics", alias="TELEMETRY_PATH", description="Path under which to expose metrics")

    # Cluster
    kubeconfig: Optional[str] = Field(
        None,
        alias="KUBECONFIG_PATH",
        description="Absolute path to the kubeconfig file, used when running outside the cluster",
    )
    exit_on_cluster_error: bool = Field(
        True,
        alias="EXIT_ON_CLUSTER_ERROR",
        description="Terminate the process when the pod list cannot be fetched",
    )

    # Probing
    probe_timeout: float = Field(DEFAULT_PROBE_TIMEOUT, alias="PROBE_TIMEOUT", description="Probe timeout in seconds")
    validate_certs: bool = Field(True, alias="VALIDATE_CERTS")
    container_name_label: str = Field(DEFAULT_CONTAINER_NAME_LABEL, alias="CONTAINER_NAME_LABEL")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    debug: bool = Field(False, alias="DEBUG")

    @field_validator("telemetry_path")
    @classmethod
    def validate_telemetry_path(cls, value: str) -> str:
        """Telemetry path must be absolute and must not shadow the landing page."""
        if not value.startswith("/") or value == "/":
            raise ValueError("telemetry path must start with '/' and cannot be '/'")
        return value

    @field_validator("probe_timeout")
    @classmethod
    def validate_probe_timeout(cls, value: float) -> float:
        """Probe timeout must be positive."""
        if value <= 0:
            raise ValueError("probe timeout must be greater than zero")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Upper-case the log level so it matches the logging module names."""
        return value.upper()


app_settings = AppConfig()
