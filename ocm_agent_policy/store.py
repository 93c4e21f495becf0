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
"""
This module defines the object store the reconciler talks to and its
Kubernetes implementation backed by NetworkingV1Api.
"""

import logging
from typing import Optional, Protocol

from kubernetes import client, config
from kubernetes.client import V1NetworkPolicy

from .context import ReconcileContext
from .errors import NotFoundError


class PolicyStore(Protocol):
    """The capabilities the reconciler needs from the cluster."""

    def get(self, ctx: Optional[ReconcileContext], namespace: str, name: str) -> V1NetworkPolicy:
        """Returns the stored object. Raises NotFoundError when it does not exist."""
        ...

    def create(self, ctx: Optional[ReconcileContext], policy: V1NetworkPolicy) -> None:
        ...

    def update(self, ctx: Optional[ReconcileContext], policy: V1NetworkPolicy) -> None:
        ...

    def delete(self, ctx: Optional[ReconcileContext], namespace: str, name: str) -> None:
        """Raises NotFoundError when the object does not exist."""
        ...


def load_api_client(kubeconfig_path: str | None = None) -> client.ApiClient:
    """Returns an ApiClient for an explicit kubeconfig, in-cluster config, or the default kubeconfig."""
    if kubeconfig_path:
        return config.new_client_from_config(kubeconfig_path)
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()
    return client.ApiClient()


class KubernetesPolicyStore:
    """
    PolicyStore backed by the Kubernetes API server.

    Not-found responses are reported as NotFoundError; every other ApiException
    is raised unchanged so callers can inspect its status.
    """

    def __init__(
        self,
        api: client.NetworkingV1Api | None = None,
        api_client: client.ApiClient | None = None,
        request_timeout: float | None = None,  # Used when the context has no deadline
    ):
        if api is None:
            api = client.NetworkingV1Api(api_client or load_api_client())
        self.api = api
        self.request_timeout = request_timeout

    def _request_kwargs(self, ctx: Optional[ReconcileContext]) -> dict:
        timeout = ctx.remaining() if ctx else None
        if timeout is None:
            timeout = self.request_timeout
        if timeout is None:
            return {}
        return {"_request_timeout": timeout}

    def get(self, ctx, namespace, name):
        try:
            return self.api.read_namespaced_network_policy(
                name=name, namespace=namespace, **self._request_kwargs(ctx))
        except client.ApiException as e:
            if e.status == 404:
                raise NotFoundError(namespace, name) from e
            raise

    def create(self, ctx, policy):
        logging.info(
            f"Creating NetworkPolicy '{policy.metadata.name}' "
            f"in namespace '{policy.metadata.namespace}'...")
        self.api.create_namespaced_network_policy(
            namespace=policy.metadata.namespace, body=policy,
            **self._request_kwargs(ctx))

    def update(self, ctx, policy):
        namespace = policy.metadata.namespace
        name = policy.metadata.name
        live = self.get(ctx, namespace, name)
        _carry_identity(live, policy)
        if ctx:
            ctx.check()
        logging.info(
            f"Replacing NetworkPolicy '{name}' in namespace '{namespace}' "
            f"at resourceVersion {policy.metadata.resource_version}...")
        try:
            self.api.replace_namespaced_network_policy(
                name=name, namespace=namespace, body=policy,
                **self._request_kwargs(ctx))
        except client.ApiException as e:
            if e.status == 404:
                raise NotFoundError(namespace, name) from e
            raise

    def delete(self, ctx, namespace, name):
        logging.info(f"Deleting NetworkPolicy '{name}' in namespace '{namespace}'...")
        try:
            self.api.delete_namespaced_network_policy(
                name=name, namespace=namespace,
                body=client.V1DeleteOptions(propagation_policy="Background"),
                **self._request_kwargs(ctx))
        except client.ApiException as e:
            if e.status == 404:
                raise NotFoundError(namespace, name) from e
            raise


# Fields assigned or managed outside of the desired object
_IDENTITY_FIELDS = ("resource_version", "uid", "owner_references", "labels", "annotations")


def _carry_identity(live: V1NetworkPolicy, outgoing: V1NetworkPolicy):
    """Copies store-managed metadata from `live` wherever `outgoing` leaves it unset."""
    for field in _IDENTITY_FIELDS:
        if getattr(outgoing.metadata, field) is None:
            setattr(outgoing.metadata, field, getattr(live.metadata, field))
