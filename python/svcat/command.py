"""The ``provision`` command: validate, provision, optionally wait, report."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, Sequence

from rich.console import Console

from .client import ProvisionOptions
from .config import WaitConfig
from .errors import CommandStateError, ProvisionFailedError, SvcatError
from .logger import get_logger
from .models import ServiceInstance
from .output import write_instance_details
from .poller import CancellationToken, CompletionPoller, PollOutcome
from .request import ProvisionInputs, ProvisionRequest, build_provision_request

logger = get_logger(__name__)

WAITING_MESSAGE = "Waiting for the instance to be provisioned..."


class CatalogApp(Protocol):
    def provision(
        self,
        instance_name: str,
        class_name: str,
        plan_name: str,
        opts: ProvisionOptions,
    ) -> ServiceInstance: ...

    def retrieve_instance(self, namespace: str, name: str) -> ServiceInstance: ...


class CommandState(str, Enum):
    UNINITIALIZED = "uninitialized"
    VALIDATED = "validated"
    EXECUTED = "executed"


class ProvisionCommand:
    """One invocation of ``svcat provision``.

    ``validate`` must be called exactly once and must succeed before ``run``;
    ``run`` may be called once. Calling either out of order raises
    ``CommandStateError``.
    """

    def __init__(
        self,
        inputs: ProvisionInputs,
        *,
        wait: WaitConfig | None = None,
        console: Console | None = None,
        token: CancellationToken | None = None,
    ):
        self.inputs = inputs
        self.wait = wait
        self.console = console or Console()
        self.token = token or CancellationToken()
        self.state = CommandState.UNINITIALIZED
        self.request: ProvisionRequest | None = None
        self.outcome: PollOutcome | None = None

    def validate(self, args: Sequence[str]) -> ProvisionRequest:
        if self.state is not CommandState.UNINITIALIZED:
            raise CommandStateError("provision command has already been validated")
        self.request = build_provision_request(args, self.inputs)
        self.state = CommandState.VALIDATED
        return self.request

    def run(self, app: CatalogApp) -> ServiceInstance:
        """Provision the instance, wait if asked, and print the best-known state.

        Raises the poll error after printing when the wait did not succeed.
        """
        if self.state is not CommandState.VALIDATED or self.request is None:
            raise CommandStateError(
                "provision command must be validated before it is run, and run only once"
            )
        self.state = CommandState.EXECUTED
        request = self.request

        try:
            instance = app.provision(
                request.instance_name,
                request.class_name,
                request.plan_name,
                request.to_options(),
            )
        except SvcatError as exc:
            raise ProvisionFailedError(
                f"failed to provision instance {request.namespace}/{request.instance_name}: {exc}",
                status_code=exc.status_code,
            ) from exc

        if self.wait is None:
            write_instance_details(self.console, instance)
            return instance

        self.console.print(WAITING_MESSAGE)
        poller = CompletionPoller(app.retrieve_instance)
        namespace = instance.namespace or request.namespace
        self.outcome = poller.wait(
            namespace,
            instance.name,
            self.wait.interval,
            self.wait.timeout,
            token=self.token,
        )
        if self.outcome.instance is not None:
            instance = self.outcome.instance

        # The provision call itself succeeded, so always show the instance and
        # only then report what went wrong while polling
        write_instance_details(self.console, instance)
        if self.outcome.error is not None:
            raise self.outcome.error
        return instance
