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

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

from .constants import OCM_AGENT_API_GROUP, OCM_AGENT_API_VERSION, OCM_AGENT_KIND


class Variant(str, Enum):
    """Deployment mode of an OcmAgent."""
    STANDARD = "standard"
    FLEET = "fleet"


class AgentDescriptor(BaseModel):
    """
    The OcmAgent a reconcile pass works on.

    Immutable for the duration of a pass. Name is expected to be non-empty and
    uid must be the OcmAgent's real UID whenever a policy may be created: the
    API server rejects owner references without one. Callers validate upstream.
    """
    model_config = ConfigDict(frozen=True)

    name: str  # Name of the OcmAgent; also the value of the pods' "app" label.
    namespace: str = ""  # Namespace the OcmAgent itself lives in.
    fleet_mode: bool = False  # True for the fleet (HyperShift) variant.
    uid: str = ""  # UID of the OcmAgent; required when policies may be created.
    api_version: str = f"{OCM_AGENT_API_GROUP}/{OCM_AGENT_API_VERSION}"
    kind: str = OCM_AGENT_KIND

    @property
    def variant(self) -> Variant:
        return Variant.FLEET if self.fleet_mode else Variant.STANDARD

    @property
    def pod_selector_value(self) -> str:
        return self.name

    @classmethod
    def from_custom_object(cls, obj: Dict[str, Any]) -> "AgentDescriptor":
        """Builds a descriptor from an OcmAgent as returned by CustomObjectsApi."""
        metadata = obj.get("metadata") or {}
        spec = obj.get("spec") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            uid=metadata.get("uid", ""),
            fleet_mode=bool(spec.get("fleetMode", False)),
            api_version=obj.get(
                "apiVersion", f"{OCM_AGENT_API_GROUP}/{OCM_AGENT_API_VERSION}"),
            kind=obj.get("kind", OCM_AGENT_KIND),
        )
