import pytest

from ocm_agent_policy.models import AgentDescriptor


@pytest.fixture
def agent() -> AgentDescriptor:
    return AgentDescriptor(
        name="ocm-agent",
        namespace="openshift-ocm-agent-operator",
        uid="0c7a9f4e-5a4b-4d1e-9a53-1f3c2c6e0b11",
    )


@pytest.fixture
def fleet_agent() -> AgentDescriptor:
    return AgentDescriptor(
        name="ocm-agent",
        namespace="openshift-ocm-agent-operator",
        uid="5e2d4a10-8b1f-4c6d-a0f2-9d7e3b4c5a61",
        fleet_mode=True,
    )
