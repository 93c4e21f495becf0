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
This module provides the NetworkPolicyReconciler, which converges the
NetworkPolicies owned by an OcmAgent towards their desired state.

Each ensure_* call is one independent pass: build the desired object, read the
current one, then create, update or leave it alone. No state is kept between
passes and nothing is retried; errors other than "not found" are raised as-is
so the calling control loop can back off.
"""

import logging
from typing import Callable, Optional

from kubernetes.client import V1NetworkPolicy

from .builder import build_network_policy, build_network_policy_for_muo
from .context import ReconcileContext
from .errors import NotFoundError
from .models import AgentDescriptor
from .ownership import stamp_owner_reference
from .store import PolicyStore
from .trace_manager import (
    DEFAULT_SERVICE_NAME, get_tracer, initialize_tracer, set_span_attributes, trace_span,
)

PolicyBuilder = Callable[[AgentDescriptor], V1NetworkPolicy]

# Outcomes of a single pass, also recorded on the trace span
CREATED = "created"
UPDATED = "updated"
UNCHANGED = "unchanged"
DELETED = "deleted"
ABSENT = "absent"


def _check(ctx: Optional[ReconcileContext]):
    if ctx is not None:
        ctx.check()


class NetworkPolicyReconciler:
    """
    Ensures the NetworkPolicies of an OcmAgent exist and match what the builders produce.
    """

    def __init__(
        self,
        store: PolicyStore,
        enable_tracing: bool = False,
        trace_service_name: str = DEFAULT_SERVICE_NAME,
    ):
        self.store = store
        self.trace_service_name = trace_service_name
        self.tracer = None
        if enable_tracing:
            initialize_tracer(service_name=trace_service_name)
            self.tracer = get_tracer(trace_service_name)

    @trace_span("ensure_network_policy")
    def ensure_network_policy(self, agent: AgentDescriptor,
                              ctx: Optional[ReconcileContext] = None) -> None:
        """Ensures the isolation policy for the agent's variant."""
        self._ensure(agent, build_network_policy, ctx)

    @trace_span("ensure_network_policy_for_muo")
    def ensure_network_policy_for_muo(self, agent: AgentDescriptor,
                                      ctx: Optional[ReconcileContext] = None) -> None:
        """Ensures the policy that lets the Managed Upgrade Operator reach the agent."""
        self._ensure(agent, build_network_policy_for_muo, ctx)

    @trace_span("ensure_all")
    def ensure_all(self, agent: AgentDescriptor,
                   ctx: Optional[ReconcileContext] = None) -> None:
        """Ensures every managed policy, stopping at the first failure."""
        self.ensure_network_policy(agent, ctx)
        self.ensure_network_policy_for_muo(agent, ctx)

    @trace_span("ensure_network_policy_deleted")
    def ensure_network_policy_deleted(self, agent: AgentDescriptor,
                                      ctx: Optional[ReconcileContext] = None) -> None:
        self._ensure_deleted(agent, build_network_policy, ctx)

    @trace_span("ensure_network_policy_for_muo_deleted")
    def ensure_network_policy_for_muo_deleted(self, agent: AgentDescriptor,
                                              ctx: Optional[ReconcileContext] = None) -> None:
        self._ensure_deleted(agent, build_network_policy_for_muo, ctx)

    @trace_span("ensure_all_deleted")
    def ensure_all_deleted(self, agent: AgentDescriptor,
                           ctx: Optional[ReconcileContext] = None) -> None:
        """
        Removes every managed policy. Owner references normally let the garbage
        collector do this; this path covers agents whose policies lost them.
        """
        self.ensure_network_policy_deleted(agent, ctx)
        self.ensure_network_policy_for_muo_deleted(agent, ctx)

    def _ensure(self, agent: AgentDescriptor, builder: PolicyBuilder,
                ctx: Optional[ReconcileContext]) -> str:
        desired = builder(agent)
        namespace = desired.metadata.namespace
        name = desired.metadata.name
        set_span_attributes({
            "networkpolicy.namespace": namespace,
            "networkpolicy.name": name,
        })

        _check(ctx)
        try:
            current = self.store.get(ctx, namespace, name)
        except NotFoundError:
            current = None
        except Exception as e:
            logging.error(f"Failed to get NetworkPolicy {namespace}/{name}: {e}")
            raise

        if current is None:
            return self._create(agent, desired, ctx)

        if current.spec == desired.spec:
            logging.debug(f"NetworkPolicy {namespace}/{name} is up to date")
            return self._outcome(UNCHANGED)

        _check(ctx)
        try:
            self.store.update(ctx, desired)
        except NotFoundError:
            # Gone since the read; rebuild, `desired` may carry the old identity
            logging.info(f"NetworkPolicy {namespace}/{name} vanished before update, recreating")
            return self._create(agent, builder(agent), ctx)
        except Exception as e:
            logging.error(f"Failed to update NetworkPolicy {namespace}/{name}: {e}")
            raise
        logging.info(f"Updated NetworkPolicy {namespace}/{name}")
        return self._outcome(UPDATED)

    def _create(self, agent: AgentDescriptor, desired: V1NetworkPolicy,
                ctx: Optional[ReconcileContext]) -> str:
        namespace = desired.metadata.namespace
        name = desired.metadata.name
        stamp_owner_reference(desired, agent)
        _check(ctx)
        try:
            self.store.create(ctx, desired)
        except Exception as e:
            logging.error(f"Failed to create NetworkPolicy {namespace}/{name}: {e}")
            raise
        logging.info(f"Created NetworkPolicy {namespace}/{name}")
        return self._outcome(CREATED)

    def _ensure_deleted(self, agent: AgentDescriptor, builder: PolicyBuilder,
                        ctx: Optional[ReconcileContext]) -> str:
        desired = builder(agent)
        namespace = desired.metadata.namespace
        name = desired.metadata.name
        set_span_attributes({
            "networkpolicy.namespace": namespace,
            "networkpolicy.name": name,
        })

        _check(ctx)
        try:
            self.store.get(ctx, namespace, name)
        except NotFoundError:
            logging.debug(f"NetworkPolicy {namespace}/{name} already absent")
            return self._outcome(ABSENT)

        _check(ctx)
        try:
            self.store.delete(ctx, namespace, name)
        except NotFoundError:
            # Removed concurrently, e.g. by the garbage collector
            return self._outcome(ABSENT)
        logging.info(f"Deleted NetworkPolicy {namespace}/{name}")
        return self._outcome(DELETED)

    @staticmethod
    def _outcome(outcome: str) -> str:
        set_span_attributes({"networkpolicy.outcome": outcome})
        return outcome
