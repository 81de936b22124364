"""Parsing of --param, --params-json and --secret values.

All functions here are pure: they take the raw flag values and return new
mappings, raising a ``ParameterError`` subclass on malformed input.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any, Iterable, NamedTuple, Sequence

from .errors import (
    ConflictingParamSourcesError,
    InvalidJSONError,
    MalformedAssignmentError,
    MalformedSecretReferenceError,
)

_KEY_MAP_PATTERN = re.compile(r"([^\[\]]+)\[([^\[\]]+)]")


class SecretKeyRef(NamedTuple):
    """Pointer to one key of a secret; resolved by the catalog, never here."""

    name: str
    key: str


class ParamSource(str, Enum):
    """Which flag supplies the provisioning parameters."""

    NONE = "none"
    ASSIGNMENTS = "assignments"
    JSON = "json"


def select_param_source(raw_params: Sequence[str], json_params: str) -> ParamSource:
    """Pick the parameter source, rejecting --params-json combined with --param."""

    has_json = bool(json_params)
    has_assignments = len(raw_params) > 0
    if has_json and has_assignments:
        raise ConflictingParamSourcesError("--params-json cannot be used with --param")
    if has_json:
        return ParamSource.JSON
    if has_assignments:
        return ParamSource.ASSIGNMENTS
    return ParamSource.NONE


def parse_variable_assignments(params: Iterable[str]) -> dict[str, Any]:
    """Parse ``NAME=VALUE`` tokens into a mapping.

    Tokens are split on the first ``=``; names and values are trimmed. A name
    given more than once keeps the value of its last occurrence.
    """

    variables: dict[str, Any] = {}
    for token in params:
        name, sep, value = token.partition("=")
        if not sep:
            raise MalformedAssignmentError(
                f"invalid parameter ({token}), must be in name=value format"
            )
        name = name.strip()
        if not name:
            raise MalformedAssignmentError(
                f"invalid parameter ({token}), variable name is required"
            )
        variables[name] = value.strip()
    return variables


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_variable_json(params: str) -> dict[str, Any]:
    """Decode a JSON object of parameters, keeping the decoded value types.

    ``NaN`` and ``Infinity`` are rejected: the catalog request body is
    serialized as strict JSON.
    """

    try:
        decoded = json.loads(params, parse_constant=_reject_constant)
    except ValueError as exc:
        raise InvalidJSONError(f"invalid parameters ({params})") from exc
    if not isinstance(decoded, dict):
        raise InvalidJSONError(f"invalid parameters ({params})")
    return decoded


def parse_key_maps(params: Iterable[str]) -> dict[str, SecretKeyRef]:
    """Parse ``SECRET[KEY]`` tokens into secret references keyed by secret name."""

    keymap: dict[str, SecretKeyRef] = {}
    for token in params:
        match = _KEY_MAP_PATTERN.fullmatch(token)
        if match is None:
            raise MalformedSecretReferenceError(
                f"invalid parameter ({token}), must be in MAP[KEY] format"
            )
        map_name = match.group(1).strip()
        key = match.group(2).strip()
        if not map_name:
            raise MalformedSecretReferenceError(
                f"invalid parameter ({token}), map name is required"
            )
        if not key:
            raise MalformedSecretReferenceError(
                f"invalid parameter ({token}), key is required"
            )
        keymap[map_name] = SecretKeyRef(map_name, key)
    return keymap
