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

"""Schemas for probe targets, probe results and exported samples."""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..commons.constants import FAILED_PROBE_VALUE, HEALTH_CHECK_METRIC_NAME, URISchemeEnum


class ProbeTarget(BaseModel):
    """HTTP liveness endpoint of a single pod."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(..., description="Pod namespace")
    container_name: str = Field("", description="Logical container name taken from the pod labels")
    pod_name: str = Field(..., description="Pod name")
    scheme: URISchemeEnum = Field(default=URISchemeEnum.HTTP, description="Probe URI scheme")
    ip: str = Field(..., description="Pod IP address")
    port: int = Field(..., description="Probe port")
    path: str = Field(default="/", description="Probe path as declared on the pod")

    @property
    def url(self) -> str:
        """Return the probe URL, bracketing IPv6 hosts and adding a missing leading slash."""
        host = f"[{self.ip}]" if ":" in self.ip else self.ip
        path = self.path if self.path.startswith("/") else f"/{self.path}"
        return f"{self.scheme.value}://{host}:{self.port}{path}"


class ProbeResult(BaseModel):
    """Outcome of one probe."""

    model_config = ConfigDict(frozen=True)

    target: ProbeTarget
    duration_ms: float = Field(..., description="Round trip in milliseconds, -1 when the probe failed")
    observed_at: float = Field(..., description="Unix timestamp in seconds")

    @property
    def succeeded(self) -> bool:
        return self.duration_ms != FAILED_PROBE_VALUE


class HealthCheckSample(BaseModel):
    """A single gauge observation exposed to the scrape."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default=HEALTH_CHECK_METRIC_NAME, description="Metric name")
    namespace: str
    container_name: str
    pod_name: str
    value: float = Field(..., description="Probe duration in milliseconds or -1")
    timestamp: float = Field(..., description="Unix timestamp in seconds")

    @property
    def labels(self) -> Tuple[str, str, str]:
        """Label values in the order of ``HEALTH_CHECK_METRIC_LABELS``."""
        return (self.namespace, self.container_name, self.pod_name)

    @classmethod
    def from_result(cls, result: ProbeResult, timestamp: float) -> "HealthCheckSample":
        """Build the sample for a probe result, stamped with the given completion time."""
        return cls(
            namespace=result.target.namespace,
            container_name=result.target.container_name,
            pod_name=result.target.pod_name,
            value=result.duration_ms,
            timestamp=timestamp,
        )
