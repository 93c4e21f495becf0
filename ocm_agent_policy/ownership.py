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

from kubernetes.client import V1NetworkPolicy, V1ObjectMeta, V1OwnerReference

from .models import AgentDescriptor


def build_owner_reference(owner: AgentDescriptor) -> V1OwnerReference:
    """Returns a controlling owner reference that blocks deletion of the owner."""
    return V1OwnerReference(
        api_version=owner.api_version,
        kind=owner.kind,
        name=owner.name,
        uid=owner.uid,
        controller=True,
        block_owner_deletion=True,
    )


def stamp_owner_reference(obj: V1NetworkPolicy, owner: AgentDescriptor) -> V1NetworkPolicy:
    """
    Appends an owner reference to `obj` in place so the garbage collector
    removes it together with `owner`. Returns `obj` for convenience.
    """
    if obj.metadata is None:
        obj.metadata = V1ObjectMeta()
    refs = list(obj.metadata.owner_references or [])
    refs.append(build_owner_reference(owner))
    obj.metadata.owner_references = refs
    return obj
