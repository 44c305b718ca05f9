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

"""Derives probe targets from pod records.

Only the first container of a pod is considered; a pod is eligible when that
container declares an ``httpGet`` liveness probe and the pod has an IP.
"""

from typing import Any, Iterable, List, Mapping, Optional, Union

from kubernetes.client import V1Container, V1Pod

from ..commons.constants import DEFAULT_CONTAINER_NAME_LABEL, URISchemeEnum
from ..commons.observability import get_logger
from .schemas import ProbeTarget


logger = get_logger(__name__)


def container_name_from_labels(
    labels: Optional[Mapping[str, str]], label_key: str = DEFAULT_CONTAINER_NAME_LABEL
) -> str:
    """Return the logical container name stored under ``label_key``, or an empty string."""
    if not labels:
        return ""
    return labels.get(label_key) or ""


def resolve_probe_port(port: Union[int, str, None], container: V1Container) -> Optional[int]:
    """Resolve an IntOrString probe port to a port number.

    Named ports are looked up in the container's declared ports.
    """
    if port is None:
        return None
    if isinstance(port, int):
        return port
    if port.isdigit():
        return int(port)
    for container_port in container.ports or []:
        if container_port.name == port:
            return container_port.container_port
    return None


def _first_container(pod: V1Pod) -> Optional[V1Container]:
    containers = pod.spec.containers if pod.spec else None
    return containers[0] if containers else None


def derive_probe_target(pod: V1Pod, label_key: str = DEFAULT_CONTAINER_NAME_LABEL) -> Optional[ProbeTarget]:
    """Build the probe target of a pod, or None when the pod is not eligible."""
    meta = pod.metadata
    pod_ip = pod.status.pod_ip if pod.status else None
    if not pod_ip:
        logger.debug("Skipping pod without IP", namespace=meta.namespace, pod_name=meta.name)
        return None

    container = _first_container(pod)
    if container is None:
        logger.debug("Skipping pod without containers", namespace=meta.namespace, pod_name=meta.name)
        return None

    liveness_probe = container.liveness_probe
    if liveness_probe is None or liveness_probe.http_get is None:
        return None

    http_get = liveness_probe.http_get
    port = resolve_probe_port(http_get.port, container)
    if port is None:
        logger.debug(
            "Skipping pod with unresolvable probe port",
            namespace=meta.namespace,
            pod_name=meta.name,
            port=http_get.port,
        )
        return None

    return ProbeTarget(
        namespace=meta.namespace or "",
        container_name=container_name_from_labels(meta.labels, label_key),
        pod_name=meta.name or "",
        scheme=URISchemeEnum.from_probe(http_get.scheme),
        ip=pod_ip,
        port=port,
        path=http_get.path or "/",
    )


def select_probe_targets(pods: Iterable[Any], label_key: str = DEFAULT_CONTAINER_NAME_LABEL) -> List[ProbeTarget]:
    """Return the probe targets of all eligible pods, in input order."""
    targets = []
    for pod in pods:
        target = derive_probe_target(pod, label_key)
        if target is not None:
            targets.append(target)
    return targets
