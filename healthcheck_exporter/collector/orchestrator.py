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

"""Runs one collection cycle: enumerate pods, probe them concurrently, gather samples."""

import asyncio
import threading
import time
from typing import Any, Callable, List, Optional

from ..commons.constants import DEFAULT_CONTAINER_NAME_LABEL, DEFAULT_PROBE_TIMEOUT
from ..commons.exceptions import CollectionError
from ..commons.observability import get_logger
from ..probe.client import ProbeClient
from ..probe.schemas import HealthCheckSample, ProbeTarget
from ..probe.selector import derive_probe_target


logger = get_logger(__name__)


class HealthCheckOrchestrator:
    """Owns the state shared by collection cycles of one exporter.

    The cluster handle and the output channel of a cycle are guarded by a lock
    held for the whole cycle, so two scrapes never overlap. Inside a cycle every
    eligible pod gets its own asyncio task; the cycle returns only once every
    launched task has written its sample.

    Attributes:
        kubernetes_handler: Object exposing ``list_pods()``.
        probe_client_factory: Callable returning a fresh probe client (an async
            context manager with an async ``probe(target)`` method).
        container_name_label (str): Pod label holding the logical container name.
    """

    def __init__(
        self,
        kubernetes_handler: Any,
        probe_client_factory: Optional[Callable[[], Any]] = None,
        container_name_label: str = DEFAULT_CONTAINER_NAME_LABEL,
    ):
        """Initialize the orchestrator.

        Args:
            kubernetes_handler: Cluster API handler used to list pods.
            probe_client_factory: Builds the probe client of a cycle. Defaults to
                ``ProbeClient`` with the default timeout.
            container_name_label: Pod label holding the logical container name.
        """
        self.kubernetes_handler = kubernetes_handler
        self.probe_client_factory = probe_client_factory or (lambda: ProbeClient(timeout=DEFAULT_PROBE_TIMEOUT))
        self.container_name_label = container_name_label
        self._lock = threading.Lock()

    def collect_cycle(self) -> List[HealthCheckSample]:
        """Run a full collection cycle and return its samples in no particular order.

        Blocks while another cycle of this orchestrator is running.

        Raises:
            KubernetesException: If the pod list cannot be fetched.
            CollectionError: If the number of collected samples differs from the
                number of launched probes.
        """
        with self._lock:
            start_time = time.time()
            pods = self.kubernetes_handler.list_pods()
            samples = asyncio.run(self._fan_out(pods))

            failed = sum(1 for sample in samples if sample.value < 0)
            logger.info(
                "Health check collection completed",
                pods=len(pods),
                probed=len(samples),
                failed=failed,
                duration_seconds=round(time.time() - start_time, 3),
            )
            return samples

    async def _fan_out(self, pods: List[Any]) -> List[HealthCheckSample]:
        channel: asyncio.Queue = asyncio.Queue()

        async with self.probe_client_factory() as prober:
            tasks = []
            for pod in pods:
                target = derive_probe_target(pod, self.container_name_label)
                if target is None:
                    continue
                tasks.append(asyncio.create_task(self._health_check(prober, target, channel)))

            await asyncio.gather(*tasks)

        # Every writer has finished; drain exactly one sample per launched task.
        launched = len(tasks)
        if channel.qsize() != launched:
            raise CollectionError("Probe results do not match launched probes", launched, channel.qsize())
        return [channel.get_nowait() for _ in range(launched)]

    @staticmethod
    async def _health_check(prober: Any, target: ProbeTarget, channel: asyncio.Queue) -> None:
        result = await prober.probe(target)
        await channel.put(HealthCheckSample.from_result(result, timestamp=time.time()))
