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

"""HTTP client timing a single GET against a pod's liveness endpoint."""

import asyncio
import time
from typing import Optional

import aiohttp

from ..commons.constants import DEFAULT_PROBE_TIMEOUT, FAILED_PROBE_VALUE
from ..commons.observability import get_logger
from .schemas import ProbeResult, ProbeTarget


logger = get_logger(__name__)


class ProbeClient:
    """Times liveness endpoints over a shared ``aiohttp`` session.

    Use as an async context manager; the session lives for one collection cycle.
    Any HTTP response counts as reachable regardless of its status code. Only
    transport failures and timeouts are reported as failed probes.

    Example:
        >>> async with ProbeClient(timeout=3.0) as prober:
        ...     result = await prober.probe(target)
    """

    def __init__(self, timeout: float = DEFAULT_PROBE_TIMEOUT, verify_ssl: bool = True):
        """Initialize the probe client.

        Args:
            timeout: Upper bound in seconds for a whole probe.
            verify_ssl: Verify TLS certificates of https probes.
        """
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "ProbeClient":
        # No connection limit, every probe of a cycle runs at once.
        connector = aiohttp.TCPConnector(ssl=self.verify_ssl, limit=0)
        self._session = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def probe(self, target: ProbeTarget) -> ProbeResult:
        """Send one GET to the target and time it.

        Args:
            target: The liveness endpoint to call.

        Returns:
            ProbeResult carrying the elapsed milliseconds until the response
            headers arrived, or ``-1`` when no response was received in time.

        Raises:
            RuntimeError: If called outside the async context manager.
        """
        if self._session is None:
            raise RuntimeError("ProbeClient must be entered before probing")

        url = target.url
        start = time.perf_counter()
        try:
            async with self._session.get(url):
                duration_ms = (time.perf_counter() - start) * 1000
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as err:
            logger.debug("Health check failed", url=url, error=repr(err))
            duration_ms = FAILED_PROBE_VALUE

        return ProbeResult(target=target, duration_ms=duration_ms, observed_at=time.time())
