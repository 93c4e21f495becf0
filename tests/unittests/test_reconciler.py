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

import pytest
from kubernetes.client import ApiException

from ocm_agent_policy.builder import build_network_policy, build_network_policy_for_muo
from ocm_agent_policy.context import ReconcileContext
from ocm_agent_policy.errors import NotFoundError, ReconcileCancelled

from test_utils.reconciler_tests_base import ReconcilerTestBase


class TestEnsureNetworkPolicyForMUO(ReconcilerTestBase):

    def test_creates_when_absent(self, agent):
        self._set_not_found()

        self.reconciler.ensure_network_policy_for_muo(agent)

        expected = build_network_policy_for_muo(agent)
        self.store_mock.get.assert_called_once_with(
            None, expected.metadata.namespace, expected.metadata.name)
        created = self._written_policy(self.store_mock.create)
        assert created.spec == expected.spec
        self.store_mock.update.assert_not_called()

    def test_updates_when_different(self, agent):
        current = build_network_policy_for_muo(agent)
        current.spec.pod_selector.match_labels = {"fake": "fake"}
        self._set_current(current)

        self.reconciler.ensure_network_policy_for_muo(agent)

        updated = self._written_policy(self.store_mock.update)
        assert updated.spec == build_network_policy_for_muo(agent).spec
        self.store_mock.create.assert_not_called()

    def test_does_not_update_when_matching(self, agent):
        self._set_current(build_network_policy_for_muo(agent))

        self.reconciler.ensure_network_policy_for_muo(agent)

        self.store_mock.create.assert_not_called()
        self.store_mock.update.assert_not_called()


class TestEnsureNetworkPolicy(ReconcilerTestBase):

    @pytest.mark.parametrize("variant_fixture", ["agent", "fleet_agent"])
    def test_creates_with_owner_reference(self, variant_fixture, request):
        agent = request.getfixturevalue(variant_fixture)
        self._set_not_found()

        self.reconciler.ensure_network_policy(agent)

        created = self._written_policy(self.store_mock.create)
        assert created.spec == build_network_policy(agent).spec
        assert created.metadata.name == build_network_policy(agent).metadata.name

        refs = created.metadata.owner_references
        assert len(refs) == 1
        assert refs[0].kind == "OcmAgent"
        assert refs[0].name == agent.name
        assert refs[0].uid == agent.uid
        assert refs[0].block_owner_deletion is True
        assert refs[0].controller is True

    @pytest.mark.parametrize("variant_fixture", ["agent", "fleet_agent"])
    def test_updates_when_different(self, variant_fixture, request):
        agent = request.getfixturevalue(variant_fixture)
        current = build_network_policy(agent)
        current.spec.pod_selector.match_labels = {"fake": "fake"}
        self._set_current(current)

        self.reconciler.ensure_network_policy(agent)

        updated = self._written_policy(self.store_mock.update)
        assert updated.spec == build_network_policy(agent).spec
        assert updated is not current

    def test_update_does_not_stamp_owner_reference(self, agent):
        current = build_network_policy(agent)
        current.spec.ingress = []
        self._set_current(current)

        self.reconciler.ensure_network_policy(agent)

        updated = self._written_policy(self.store_mock.update)
        assert updated.metadata.owner_references is None

    def test_reordered_ingress_peers_trigger_update(self, fleet_agent):
        current = build_network_policy(fleet_agent)
        current.spec.ingress[0]._from.reverse()
        self._set_current(current)

        self.reconciler.ensure_network_policy(fleet_agent)

        self.store_mock.update.assert_called_once()

    @pytest.mark.parametrize("variant_fixture", ["agent", "fleet_agent"])
    def test_does_not_update_when_matching(self, variant_fixture, request):
        agent = request.getfixturevalue(variant_fixture)
        self._set_current(build_network_policy(agent))

        self.reconciler.ensure_network_policy(agent)

        self.store_mock.create.assert_not_called()
        self.store_mock.update.assert_not_called()


class TestErrorPropagation(ReconcilerTestBase):

    def test_get_error_is_raised_without_writes(self, agent):
        error = ApiException(status=500, reason="Internal Server Error")
        self._set_get_error(error)

        with pytest.raises(ApiException) as excinfo:
            self.reconciler.ensure_network_policy(agent)

        assert excinfo.value is error
        self.store_mock.create.assert_not_called()
        self.store_mock.update.assert_not_called()

    def test_create_error_is_raised(self, agent):
        self._set_not_found()
        error = ApiException(status=409, reason="AlreadyExists")
        self.store_mock.create.side_effect = error

        with pytest.raises(ApiException) as excinfo:
            self.reconciler.ensure_network_policy_for_muo(agent)

        assert excinfo.value is error

    def test_update_error_is_raised(self, agent):
        current = build_network_policy(agent)
        current.spec.pod_selector.match_labels = {"fake": "fake"}
        self._set_current(current)
        error = ApiException(status=409, reason="Conflict")
        self.store_mock.update.side_effect = error

        with pytest.raises(ApiException) as excinfo:
            self.reconciler.ensure_network_policy(agent)

        assert excinfo.value is error
        self.store_mock.update.assert_called_once()

    def test_ensure_all_stops_at_first_error(self, agent):
        self._set_get_error(ConnectionError("connection refused"))

        with pytest.raises(ConnectionError):
            self.reconciler.ensure_all(agent)

        self.store_mock.get.assert_called_once()


class TestCancellation(ReconcilerTestBase):

    def test_cancelled_context_performs_no_store_calls(self, agent):
        ctx = ReconcileContext()
        ctx.cancel()

        with pytest.raises(ReconcileCancelled):
            self.reconciler.ensure_network_policy(agent, ctx)

        self.store_mock.get.assert_not_called()

    def test_cancel_after_get_skips_write(self, agent):
        ctx = ReconcileContext()

        def cancel_then_not_found(c, namespace, name):
            ctx.cancel()
            raise NotFoundError(namespace, name)
        self.store_mock.get.side_effect = cancel_then_not_found

        with pytest.raises(ReconcileCancelled):
            self.reconciler.ensure_network_policy(agent, ctx)

        self.store_mock.create.assert_not_called()

    def test_context_is_passed_to_store(self, agent):
        ctx = ReconcileContext(timeout=30)
        self._set_not_found()

        self.reconciler.ensure_network_policy_for_muo(agent, ctx)

        assert self.store_mock.get.call_args.args[0] is ctx
        assert self.store_mock.create.call_args.args[0] is ctx


class TestEnsureDeleted(ReconcilerTestBase):

    def test_deletes_existing_policies(self, agent):
        self._set_current(build_network_policy(agent))

        self.reconciler.ensure_all_deleted(agent)

        deleted = [c.args[1:] for c in self.store_mock.delete.call_args_list]
        assert deleted == [
            (build_network_policy(agent).metadata.namespace,
             build_network_policy(agent).metadata.name),
            (build_network_policy_for_muo(agent).metadata.namespace,
             build_network_policy_for_muo(agent).metadata.name),
        ]

    def test_absent_policy_is_not_deleted(self, agent):
        self._set_not_found()

        self.reconciler.ensure_network_policy_deleted(agent)

        self.store_mock.delete.assert_not_called()

    def test_concurrent_removal_is_success(self, agent):
        self._set_current(build_network_policy_for_muo(agent))
        self.store_mock.delete.side_effect = NotFoundError("ns", "name")

        self.reconciler.ensure_network_policy_for_muo_deleted(agent)

        self.store_mock.delete.assert_called_once()


class TestPolicyRemovedDuringUpdate(ReconcilerTestBase):

    def test_recreates_when_update_finds_nothing(self, agent):
        current = build_network_policy(agent)
        current.spec.pod_selector.match_labels = {"fake": "fake"}
        self._set_current(current)

        def update_after_removal(ctx, policy):
            # Simulates a store that carried live identity before finding the object gone
            policy.metadata.resource_version = "7"
            raise NotFoundError(policy.metadata.namespace, policy.metadata.name)
        self.store_mock.update.side_effect = update_after_removal

        self.reconciler.ensure_network_policy(agent)

        created = self._written_policy(self.store_mock.create)
        assert created.spec == build_network_policy(agent).spec
        assert created.metadata.resource_version is None
        assert len(created.metadata.owner_references) == 1
        assert created.metadata.owner_references[0].uid == agent.uid

    def test_create_error_after_removal_is_raised(self, agent):
        current = build_network_policy_for_muo(agent)
        current.spec.ingress = []
        self._set_current(current)
        self.store_mock.update.side_effect = NotFoundError("ns", "name")
        error = ApiException(status=403, reason="Forbidden")
        self.store_mock.create.side_effect = error

        with pytest.raises(ApiException) as excinfo:
            self.reconciler.ensure_network_policy_for_muo(agent)

        assert excinfo.value is error
