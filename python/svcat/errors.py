"""Custom exceptions for the svcat client and commands."""

from __future__ import annotations


class SvcatError(RuntimeError):
    """Base error for svcat commands and catalog interactions."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigError(SvcatError):
    """Raised when client or wait configuration is invalid."""


class CommandStateError(SvcatError):
    """Raised when a command is validated or run out of order."""


# ----------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------


class ValidationError(SvcatError):
    """Raised for invalid command-line input, before any network call."""


class MissingInstanceNameError(ValidationError):
    """Raised when no instance name was given."""


class ConflictingParamSourcesError(ValidationError):
    """Raised when --params-json and --param are combined."""


class ParameterError(ValidationError):
    """Base error for unparseable parameter or secret tokens."""


class MalformedAssignmentError(ParameterError):
    """Raised for a NAME=VALUE token without '=' or without a name."""


class InvalidJSONError(ParameterError):
    """Raised when a parameters document is not a JSON object."""


class MalformedSecretReferenceError(ParameterError):
    """Raised for a secret token not in SECRET[KEY] format."""


# ----------------------------------------------------------------------
# Catalog requests
# ----------------------------------------------------------------------


class CatalogRequestError(SvcatError):
    """Raised for non-auth HTTP errors and transport failures."""


class CatalogAuthError(CatalogRequestError):
    """Raised when the catalog rejects our credentials."""


class InstanceNotFoundError(CatalogRequestError):
    """Raised when the requested instance cannot be located."""


class ProvisionFailedError(SvcatError):
    """Raised when the catalog refuses or fails the provision request."""


# ----------------------------------------------------------------------
# Polling
# ----------------------------------------------------------------------


class PollError(SvcatError):
    """Base error for the wait phase; provisioning itself already succeeded."""


class PollTimedOutError(PollError):
    """Raised when the instance is not terminal before the deadline."""


class PollCancelledError(PollError):
    """Raised when the caller cancelled the wait."""


class PollQueryFailedError(PollError):
    """Raised when the last status query before the deadline failed."""
