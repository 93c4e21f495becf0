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

import copy

from ocm_agent_policy.errors import NotFoundError


class FakePolicyStore:
    """
    In-memory PolicyStore. Records every write so tests can assert on them and
    assigns a resource version on each write like the API server does.
    """

    def __init__(self, objects=None):
        self.objects = {}
        self.creates = []
        self.updates = []
        self.deletes = []
        self._version = 0
        for obj in objects or []:
            self._put(obj)

    def _key(self, obj):
        return (obj.metadata.namespace, obj.metadata.name)

    def _put(self, obj):
        self._version += 1
        stored = copy.deepcopy(obj)
        stored.metadata.resource_version = str(self._version)
        self.objects[self._key(stored)] = stored

    def get(self, ctx, namespace, name):
        try:
            return copy.deepcopy(self.objects[(namespace, name)])
        except KeyError:
            raise NotFoundError(namespace, name)

    def create(self, ctx, policy):
        self.creates.append(copy.deepcopy(policy))
        self._put(policy)

    def update(self, ctx, policy):
        current = self.get(ctx, policy.metadata.namespace, policy.metadata.name)
        self.updates.append(copy.deepcopy(policy))
        stored = copy.deepcopy(policy)
        if stored.metadata.owner_references is None:
            stored.metadata.owner_references = current.metadata.owner_references
        self._put(stored)

    def delete(self, ctx, namespace, name):
        if (namespace, name) not in self.objects:
            raise NotFoundError(namespace, name)
        self.deletes.append((namespace, name))
        del self.objects[(namespace, name)]

    @property
    def writes(self):
        return len(self.creates) + len(self.updates) + len(self.deletes)
