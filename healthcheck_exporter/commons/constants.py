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

"""Defines constant values used throughout the project, including the exported metric schema."""

from enum import StrEnum


HEALTH_CHECK_METRIC_NAME = "container_health_check_duration_millisecond"
HEALTH_CHECK_METRIC_HELP = "The time(millisecond) taken to invoke the health check interface"
HEALTH_CHECK_METRIC_LABELS = ("namespace", "container_name", "pod_name")

# Reported instead of a duration when a probe does not get a response.
FAILED_PROBE_VALUE = -1.0

DEFAULT_PROBE_TIMEOUT = 3.0
DEFAULT_CONTAINER_NAME_LABEL = "app"


class URISchemeEnum(StrEnum):
    """URI schemes a liveness probe can declare.

    Attributes:
        HTTP: Plain HTTP, the default when the probe declares no scheme.
        HTTPS: HTTP over TLS.
    """

    HTTP = "http"
    HTTPS = "https"

    @classmethod
    def from_probe(cls, scheme: str | None) -> "URISchemeEnum":
        """Map the scheme declared on an HTTPGet action to a URI scheme."""
        if scheme and scheme.upper() == "HTTPS":
            return cls.HTTPS
        return cls.HTTP
