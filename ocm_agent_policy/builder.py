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
Builders for the NetworkPolicies managed on behalf of an OcmAgent.

Every builder is a pure function of the AgentDescriptor: the same descriptor
always yields an equal V1NetworkPolicySpec, so the reconciler can compare the
result against the cluster without spurious updates.
"""

from typing import Iterable, List

from kubernetes.client import (
    V1LabelSelector,
    V1NetworkPolicy,
    V1NetworkPolicyIngressRule,
    V1NetworkPolicyPeer,
    V1NetworkPolicySpec,
    V1ObjectMeta,
)

from .constants import (
    APP_LABEL,
    MUO_NAMESPACE,
    MUO_NETWORK_POLICY_SUFFIX,
    NAMESPACE_NAME_LABEL,
    NETWORK_POLICY_API_VERSION,
    NETWORK_POLICY_DEFAULT_NAMESPACES,
    NETWORK_POLICY_FLEET_NAMESPACES,
    NETWORK_POLICY_KIND,
    OCM_AGENT_NAMESPACE,
    OCM_AGENT_NETWORK_POLICY_SUFFIX,
    OCM_FLEET_AGENT_NETWORK_POLICY_SUFFIX,
)
from .models import AgentDescriptor, Variant


def network_policy_name_for_muo(agent: AgentDescriptor) -> str:
    return agent.name + MUO_NETWORK_POLICY_SUFFIX


def network_policy_name(agent: AgentDescriptor) -> str:
    if agent.variant == Variant.FLEET:
        return agent.name + OCM_FLEET_AGENT_NETWORK_POLICY_SUFFIX
    return agent.name + OCM_AGENT_NETWORK_POLICY_SUFFIX


def _allowed_namespaces(agent: AgentDescriptor) -> Iterable[str]:
    if agent.variant == Variant.FLEET:
        return NETWORK_POLICY_FLEET_NAMESPACES
    return NETWORK_POLICY_DEFAULT_NAMESPACES


def _pod_selector(agent: AgentDescriptor) -> V1LabelSelector:
    return V1LabelSelector(match_labels={APP_LABEL: agent.pod_selector_value})


def _namespace_peer(namespace: str) -> V1NetworkPolicyPeer:
    return V1NetworkPolicyPeer(
        namespace_selector=V1LabelSelector(
            match_labels={NAMESPACE_NAME_LABEL: namespace}),
    )


def _network_policy(name: str, pod_selector: V1LabelSelector,
                    ingress: List[V1NetworkPolicyIngressRule]) -> V1NetworkPolicy:
    return V1NetworkPolicy(
        api_version=NETWORK_POLICY_API_VERSION,
        kind=NETWORK_POLICY_KIND,
        metadata=V1ObjectMeta(name=name, namespace=OCM_AGENT_NAMESPACE),
        spec=V1NetworkPolicySpec(
            pod_selector=pod_selector,
            policy_types=["Ingress"],
            ingress=ingress,
        ),
    )


def build_network_policy_for_muo(agent: AgentDescriptor) -> V1NetworkPolicy:
    """
    Builds the policy letting the Managed Upgrade Operator reach the agent pods.

    The name does not depend on the variant.
    """
    return _network_policy(
        network_policy_name_for_muo(agent),
        _pod_selector(agent),
        [V1NetworkPolicyIngressRule(_from=[_namespace_peer(MUO_NAMESPACE)])],
    )


def build_network_policy(agent: AgentDescriptor) -> V1NetworkPolicy:
    """
    Builds the isolation policy for the agent pods.

    Only the monitoring namespaces of the agent's variant may reach the pods;
    peers follow the order of the variant's namespace list.
    """
    peers = [_namespace_peer(ns) for ns in _allowed_namespaces(agent)]
    return _network_policy(
        network_policy_name(agent),
        _pod_selector(agent),
        [V1NetworkPolicyIngressRule(_from=peers)],
    )
