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

import os

from .context import ReconcileContext
from .reconciler import NetworkPolicyReconciler
from .store import KubernetesPolicyStore, load_api_client
from .trace_manager import DEFAULT_SERVICE_NAME

ENV_PREFIX = "OCM_AGENT_POLICY_"
DEFAULT_REQUEST_TIMEOUT = 30.0


def _env_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class ReconcilerSettings:
    """
    A container class that stores all settings required to create a NetworkPolicyReconciler
    talking to a Kubernetes cluster.
    """

    def __init__(
        self,
        kubeconfig_path: str | None = None,  # None: in-cluster config, then default kubeconfig
        request_timeout: float | None = DEFAULT_REQUEST_TIMEOUT,
        enable_tracing: bool = False,
        trace_service_name: str = DEFAULT_SERVICE_NAME,
    ):
        self._kubeconfig_path = kubeconfig_path
        self._request_timeout = request_timeout
        self._enable_tracing = enable_tracing
        self._trace_service_name = trace_service_name

    @property
    def kubeconfig_path(self) -> str | None:
        return self._kubeconfig_path

    @property
    def request_timeout(self) -> float | None:
        return self._request_timeout

    @property
    def enable_tracing(self) -> bool:
        return self._enable_tracing

    @property
    def trace_service_name(self) -> str:
        return self._trace_service_name

    @classmethod
    def from_env(cls, environ=None) -> "ReconcilerSettings":
        """Reads settings from KUBECONFIG and OCM_AGENT_POLICY_* environment variables."""
        environ = os.environ if environ is None else environ

        timeout = environ.get(f"{ENV_PREFIX}REQUEST_TIMEOUT")
        try:
            request_timeout = float(timeout) if timeout else DEFAULT_REQUEST_TIMEOUT
        except ValueError:
            raise ValueError(
                f"{ENV_PREFIX}REQUEST_TIMEOUT must be a number of seconds, got '{timeout}'")

        return cls(
            kubeconfig_path=environ.get("KUBECONFIG") or None,
            request_timeout=request_timeout,
            enable_tracing=_env_bool(environ.get(f"{ENV_PREFIX}ENABLE_TRACING")),
            trace_service_name=environ.get(
                f"{ENV_PREFIX}TRACE_SERVICE_NAME", DEFAULT_SERVICE_NAME),
        )

    def create_store(self) -> KubernetesPolicyStore:
        """Creates a store connected to the configured cluster."""
        return KubernetesPolicyStore(
            api_client=load_api_client(self._kubeconfig_path),
            request_timeout=self._request_timeout,
        )

    def create_reconciler(self) -> NetworkPolicyReconciler:
        """Creates an instance of the 'NetworkPolicyReconciler' class"""
        return NetworkPolicyReconciler(
            self.create_store(),
            enable_tracing=self._enable_tracing,
            trace_service_name=self._trace_service_name,
        )

    def new_context(self, timeout: float | None = None) -> ReconcileContext:
        """Returns a context for one reconcile pass, optionally bounded by `timeout` seconds."""
        return ReconcileContext(timeout=timeout)
