# Copyright 2026 The Kubernetes Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


class PolicyStoreError(Exception):
    """Base class for errors raised by this library."""


class NotFoundError(PolicyStoreError):
    """The requested object does not exist in the store."""

    def __init__(self, namespace: str, name: str):
        super().__init__(f"NetworkPolicy {namespace}/{name} not found")
        self.namespace = namespace
        self.name = name


class ReconcileCancelled(PolicyStoreError):
    """The caller cancelled the reconcile pass."""


class ReconcileTimeout(ReconcileCancelled):
    """The reconcile pass ran past its deadline."""
