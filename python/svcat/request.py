"""Validated provision request built from raw command-line input."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from .client import ProvisionOptions
from .errors import MissingInstanceNameError, ParameterError
from .parameters import (
    ParamSource,
    SecretKeyRef,
    parse_key_maps,
    parse_variable_assignments,
    parse_variable_json,
    select_param_source,
)


@dataclass(frozen=True)
class ProvisionInputs:
    """Raw flag values for ``svcat provision``, exactly as the user typed them."""

    class_name: str = ""
    plan_name: str = ""
    external_id: str = ""
    namespace: str = ""
    raw_params: tuple[str, ...] = ()
    json_params: str = ""
    raw_secrets: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProvisionRequest:
    instance_name: str
    class_name: str
    plan_name: str
    namespace: str
    external_id: str | None = None
    params: Mapping[str, Any] = field(default_factory=dict)
    secrets: Mapping[str, SecretKeyRef] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.instance_name:
            raise MissingInstanceNameError("an instance name is required")
        # Freeze the mappings so the request cannot change after validation
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "secrets", MappingProxyType(dict(self.secrets)))

    def to_options(self) -> ProvisionOptions:
        return ProvisionOptions(
            namespace=self.namespace,
            external_id=self.external_id,
            params=dict(self.params),
            secrets=dict(self.secrets),
        )


def _parse_params(inputs: ProvisionInputs) -> dict[str, Any]:
    source = select_param_source(inputs.raw_params, inputs.json_params)

    if source is ParamSource.JSON:
        try:
            return parse_variable_json(inputs.json_params)
        except ParameterError as exc:
            raise type(exc)(f"invalid --params-json value ({exc})") from exc

    try:
        return parse_variable_assignments(inputs.raw_params)
    except ParameterError as exc:
        raise type(exc)(f"invalid --param value ({exc})") from exc


def build_provision_request(
    args: Sequence[str], inputs: ProvisionInputs
) -> ProvisionRequest:
    """Validate positional arguments and flags into a ``ProvisionRequest``.

    Only the first positional argument is used; any others are ignored.
    """

    if not args:
        raise MissingInstanceNameError("an instance name is required")
    instance_name = args[0]

    params = _parse_params(inputs)

    try:
        secrets = parse_key_maps(inputs.raw_secrets)
    except ParameterError as exc:
        raise type(exc)(f"invalid --secret value ({exc})") from exc

    return ProvisionRequest(
        instance_name=instance_name,
        class_name=inputs.class_name,
        plan_name=inputs.plan_name,
        namespace=inputs.namespace,
        external_id=inputs.external_id or None,
        params=params,
        secrets=secrets,
    )
