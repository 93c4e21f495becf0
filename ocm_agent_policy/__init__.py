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

from .builder import build_network_policy, build_network_policy_for_muo
from .context import ReconcileContext
from .errors import NotFoundError, PolicyStoreError, ReconcileCancelled, ReconcileTimeout
from .models import AgentDescriptor, Variant
from .ownership import stamp_owner_reference
from .reconciler import NetworkPolicyReconciler
from .settings import ReconcilerSettings
from .store import KubernetesPolicyStore, PolicyStore
