"""Command-line client for provisioning service catalog instances."""

from .client import ProvisionOptions, ServiceCatalogClient
from .command import CommandState, ProvisionCommand
from .config import ClientConfig, WaitConfig
from .errors import (
    CatalogAuthError,
    CatalogRequestError,
    CommandStateError,
    ConfigError,
    ConflictingParamSourcesError,
    InstanceNotFoundError,
    InvalidJSONError,
    MalformedAssignmentError,
    MalformedSecretReferenceError,
    MissingInstanceNameError,
    ParameterError,
    PollCancelledError,
    PollError,
    PollQueryFailedError,
    PollTimedOutError,
    ProvisionFailedError,
    SvcatError,
    ValidationError,
)
from .models import InstanceCondition, ServiceInstance
from .parameters import (
    ParamSource,
    SecretKeyRef,
    parse_key_maps,
    parse_variable_assignments,
    parse_variable_json,
)
from .poller import CancellationToken, CompletionPoller, PollOutcome, PollStatus
from .request import ProvisionInputs, ProvisionRequest, build_provision_request

__all__ = [
    # Client
    "ClientConfig",
    "ProvisionOptions",
    "ServiceCatalogClient",
    # Models
    "InstanceCondition",
    "ServiceInstance",
    # Parameters
    "ParamSource",
    "SecretKeyRef",
    "parse_key_maps",
    "parse_variable_assignments",
    "parse_variable_json",
    # Request / command
    "ProvisionInputs",
    "ProvisionRequest",
    "build_provision_request",
    "CommandState",
    "ProvisionCommand",
    # Waiting
    "WaitConfig",
    "CancellationToken",
    "CompletionPoller",
    "PollOutcome",
    "PollStatus",
    # Errors
    "SvcatError",
    "ConfigError",
    "CommandStateError",
    "ValidationError",
    "MissingInstanceNameError",
    "ConflictingParamSourcesError",
    "ParameterError",
    "MalformedAssignmentError",
    "InvalidJSONError",
    "MalformedSecretReferenceError",
    "CatalogRequestError",
    "CatalogAuthError",
    "InstanceNotFoundError",
    "ProvisionFailedError",
    "PollError",
    "PollTimedOutError",
    "PollCancelledError",
    "PollQueryFailedError",
]
