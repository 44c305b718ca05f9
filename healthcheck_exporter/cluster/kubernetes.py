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

"""Read-only access to the Kubernetes API for pod enumeration."""

import os
from typing import List, Optional

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from ..commons.exceptions import KubernetesException
from ..commons.observability import get_logger


logger = get_logger(__name__)


def is_running_in_cluster() -> bool:
    """Return True when the service account environment of a pod is present."""
    return bool(os.getenv("KUBERNETES_SERVICE_HOST")) and bool(os.getenv("KUBERNETES_SERVICE_PORT"))


class KubernetesHandler:
    """Kubernetes cluster handler.

    Builds a dedicated API client (in-cluster credentials when running inside a
    pod, the kubeconfig file otherwise) and lists pods across all namespaces.

    Attributes:
        kubeconfig (Optional[str]): Path to the kubeconfig file; ``None`` uses the
            client library's default location.
        api_client (client.ApiClient): The underlying API client.
    """

    def __init__(self, kubeconfig: Optional[str] = None, verify_ssl: Optional[bool] = None):
        """Initialize the KubernetesHandler.

        Args:
            kubeconfig (Optional[str]): Path to the kubeconfig file.
            verify_ssl (Optional[bool]): Override TLS verification towards the API server.

        Raises:
            KubernetesException: If no usable configuration can be loaded.
        """
        self.kubeconfig = kubeconfig
        self.api_client = self._load_kube_config(verify_ssl)
        self.core_v1 = client.CoreV1Api(api_client=self.api_client)

    def _load_kube_config(self, verify_ssl: Optional[bool]) -> client.ApiClient:
        """Load the cluster configuration into a fresh API client."""
        configuration = client.Configuration()
        try:
            if is_running_in_cluster():
                config.load_incluster_config(client_configuration=configuration)
                logger.info("Using in-cluster Kubernetes configuration")
            else:
                config.load_kube_config(config_file=self.kubeconfig, client_configuration=configuration)
                logger.info("Using local Kubernetes configuration", kubeconfig=self.kubeconfig or "default")
        except config.ConfigException as err:
            logger.error(f"Found error while loading Kubernetes config. {err}")
            raise KubernetesException("Invalid Kubernetes configuration") from err
        except Exception as err:
            logger.error(f"Found error while loading Kubernetes config. {err}")
            raise KubernetesException("Found error while loading Kubernetes configuration") from err

        if verify_ssl is not None:
            configuration.verify_ssl = verify_ssl
        return client.ApiClient(configuration)

    def list_pods(self) -> List[client.V1Pod]:
        """List the pods of every namespace.

        Returns:
            List[client.V1Pod]: The pods as returned by the API server.

        Raises:
            KubernetesException: If the API call fails.
        """
        try:
            pods = self.core_v1.list_pod_for_all_namespaces()
        except ApiException as err:
            logger.error(f"Found Kubernetes API error while listing pods. {err.reason}")
            raise KubernetesException("Found error while listing pods") from err
        except Exception as err:
            logger.error(f"Found error while listing pods {err}")
            raise KubernetesException("Found error while listing pods") from err
        return list(pods.items or [])
