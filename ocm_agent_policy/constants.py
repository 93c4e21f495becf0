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

# Constants for API Groups and Resources
OCM_AGENT_API_GROUP = "ocmagent.managed.openshift.io"
OCM_AGENT_API_VERSION = "v1alpha1"
OCM_AGENT_KIND = "OcmAgent"
OCM_AGENT_PLURAL = "ocmagents"

NETWORK_POLICY_API_VERSION = "networking.k8s.io/v1"
NETWORK_POLICY_KIND = "NetworkPolicy"

# All managed NetworkPolicies live here, regardless of the OcmAgent's namespace
OCM_AGENT_NAMESPACE = "openshift-ocm-agent-operator"

APP_LABEL = "app"
NAMESPACE_NAME_LABEL = "kubernetes.io/metadata.name"

# Managed Upgrade Operator, the companion service allowed to reach the agent
MUO_NAMESPACE = "openshift-managed-upgrade-operator"
MUO_NETWORK_POLICY_SUFFIX = "-allow-muo-communication"

OCM_AGENT_NETWORK_POLICY_SUFFIX = "-allow-only-alertmanager"
OCM_FLEET_AGENT_NETWORK_POLICY_SUFFIX = "-allow-only-rhobs"

# Ordered: the peer list is compared as a sequence
NETWORK_POLICY_DEFAULT_NAMESPACES = (
    "openshift-monitoring",
)
NETWORK_POLICY_FLEET_NAMESPACES = (
    "openshift-observability-operator",
    "openshift-monitoring",
)
