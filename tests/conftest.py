from __future__ import annotations

import io

import pytest
from rich.console import Console

from svcat.models import ServiceInstance
from svcat.poller import CancellationToken

READY_CONDITIONS = [
    {
        "type": "Ready",
        "status": "True",
        "reason": "ProvisionedSuccessfully",
        "message": "The instance was provisioned successfully",
    }
]
PROVISIONING_CONDITIONS = [
    {
        "type": "Ready",
        "status": "False",
        "reason": "Provisioning",
        "message": "The instance is being provisioned asynchronously",
    }
]
FAILED_CONDITIONS = [
    {"type": "Ready", "status": "False", "reason": "ProvisionCallFailed"},
    {
        "type": "Failed",
        "status": "True",
        "reason": "ProvisionCallFailed",
        "message": "Plan is not available",
    },
]


def build_instance(
    name: str = "mysql1234",
    namespace: str = "foobarnamespace",
    conditions: list[dict] | None = None,
    *,
    async_op: bool = False,
    **spec,
) -> ServiceInstance:
    payload = {
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "clusterServiceClassExternalName": "mysqldb",
            "clusterServicePlanExternalName": "free",
            **spec,
        },
        "status": {
            "conditions": conditions if conditions is not None else [],
            "asyncOpInProgress": async_op,
        },
    }
    return ServiceInstance.model_validate(payload)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class FakeToken(CancellationToken):
    """Token whose waits advance a fake clock instead of sleeping."""

    def __init__(self, clock: FakeClock) -> None:
        super().__init__()
        self.clock = clock
        self.sleeps: list[float] = []

    def wait(self, seconds: float) -> bool:
        if self.cancelled:
            return True
        self.sleeps.append(seconds)
        self.clock.now += seconds
        return False


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token(clock: FakeClock) -> FakeToken:
    return FakeToken(clock)


@pytest.fixture
def console_buffer() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    console = Console(file=buffer, width=120, color_system=None)
    return console, buffer
