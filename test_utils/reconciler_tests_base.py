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

from unittest import mock

from ocm_agent_policy.errors import NotFoundError
from ocm_agent_policy.reconciler import NetworkPolicyReconciler


class ReconcilerTestBase:
    def setup_method(self):
        self.store_mock = mock.MagicMock()
        self.reconciler = NetworkPolicyReconciler(self.store_mock)

    def _set_not_found(self):
        def raise_not_found(ctx, namespace, name):
            raise NotFoundError(namespace, name)
        self.store_mock.get.side_effect = raise_not_found

    def _set_current(self, policy):
        self.store_mock.get.side_effect = None
        self.store_mock.get.return_value = policy

    def _set_get_error(self, error: Exception):
        self.store_mock.get.side_effect = error

    def _written_policy(self, method):
        method.assert_called_once()
        _, policy = method.call_args.args
        return policy
