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

"""Defines custom exceptions to handle specific error cases gracefully."""


class KubernetesException(Exception):
    """Base exception for kubernetes handler errors.

    Raised when the cluster API client cannot be built or the pod list cannot be
    fetched. Both cases are unrecoverable for the exporter since every metric
    depends on a fresh pod list.
    """

    def __init__(self, message="Kubernetes error occurred"):
        """Initialize KubernetesException."""
        self.message = message
        super().__init__(self.message)


class CollectionError(Exception):
    """Raise when a collection cycle cannot account for every probe it launched."""

    def __init__(self, message: str, launched: int = 0, collected: int = 0):
        """Initialize the CollectionError with a message and the fan-in counters."""
        self.message = message
        self.launched = launched
        self.collected = collected
        super().__init__(self.message)

    def __str__(self):
        """Return a string representation of the collection error."""
        return f"CollectionError: {self.message} (launched={self.launched}, collected={self.collected})"
