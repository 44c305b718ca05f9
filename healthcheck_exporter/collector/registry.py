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

"""Exposes collection cycles to ``prometheus_client`` as a custom collector."""

from typing import Iterable

from prometheus_client import CollectorRegistry
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from ..commons.constants import HEALTH_CHECK_METRIC_HELP, HEALTH_CHECK_METRIC_LABELS, HEALTH_CHECK_METRIC_NAME
from .orchestrator import HealthCheckOrchestrator


def new_health_check_family() -> GaugeMetricFamily:
    """Create an empty gauge family carrying the exported schema."""
    return GaugeMetricFamily(
        HEALTH_CHECK_METRIC_NAME,
        HEALTH_CHECK_METRIC_HELP,
        labels=list(HEALTH_CHECK_METRIC_LABELS),
    )


class HealthCheckCollector(Collector):
    """Translates orchestrator samples into a timestamped gauge family."""

    def __init__(self, orchestrator: HealthCheckOrchestrator):
        """Initialize the collector with the orchestrator that runs each cycle."""
        self.orchestrator = orchestrator

    def describe(self) -> Iterable[GaugeMetricFamily]:
        """Yield the static schema without contacting the cluster."""
        yield new_health_check_family()

    def collect(self) -> Iterable[GaugeMetricFamily]:
        """Run one collection cycle and yield its samples."""
        family = new_health_check_family()
        for sample in self.orchestrator.collect_cycle():
            family.add_metric(list(sample.labels), sample.value, timestamp=sample.timestamp)
        yield family


def build_registry(orchestrator: HealthCheckOrchestrator) -> CollectorRegistry:
    """Create a registry that only serves the health check collector."""
    registry = CollectorRegistry(auto_describe=True)
    registry.register(HealthCheckCollector(orchestrator))
    return registry
