"""HTTP client for the service catalog resource manager."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

import requests
from pydantic import ValidationError as ModelValidationError

from .config import ClientConfig
from .errors import (
    CatalogAuthError,
    CatalogRequestError,
    ConfigError,
    InstanceNotFoundError,
)
from .logger import get_logger
from .models import ServiceInstance
from .parameters import SecretKeyRef
from .version import user_agent

logger = get_logger(__name__)

API_GROUP = "servicecatalog.k8s.io"
API_VERSION = "v1beta1"


@dataclass(frozen=True)
class ProvisionOptions:
    """Optional settings for a provision call."""

    namespace: str
    external_id: str | None = None
    params: Mapping[str, Any] = field(default_factory=dict)
    secrets: Mapping[str, SecretKeyRef] = field(default_factory=dict)


def build_instance_body(
    instance_name: str,
    class_name: str,
    plan_name: str,
    opts: ProvisionOptions,
) -> dict[str, Any]:
    """Build the ServiceInstance resource sent to the catalog."""

    spec: dict[str, Any] = {
        "clusterServiceClassExternalName": class_name,
        "clusterServicePlanExternalName": plan_name,
    }
    if opts.external_id:
        spec["externalID"] = opts.external_id
    if opts.params:
        spec["parameters"] = dict(opts.params)
    if opts.secrets:
        spec["parametersFrom"] = [
            {"secretKeyRef": {"name": ref.name, "key": ref.key}}
            for ref in opts.secrets.values()
        ]

    return {
        "apiVersion": f"{API_GROUP}/{API_VERSION}",
        "kind": "ServiceInstance",
        "metadata": {"name": instance_name, "namespace": opts.namespace},
        "spec": spec,
    }


class ServiceCatalogClient:
    """Thin wrapper around the catalog's ServiceInstance API."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        session: requests.Session | None = None,
    ):
        """Initialize the catalog client.

        Args:
            config: Client configuration. If None, loads from environment.
            session: Optional requests session to use.
        """
        self._config = config or ClientConfig.from_env()
        if not self._config.base_url:
            raise ConfigError(
                "Catalog base URL missing. Did you forget to set SVCAT_URL?"
            )
        self._session = session or requests.Session()
        logger.debug("Catalog client configured: %s", self._config.to_dict())

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip("/")

    def _instances_path(self, namespace: str, name: str | None = None) -> str:
        path = f"/apis/{API_GROUP}/{API_VERSION}/namespaces/{namespace}/serviceinstances"
        if name:
            path = f"{path}/{name}"
        return path

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        expected_status: int = 200,
    ) -> dict[str, Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = self._config.headers(user_agent())

        logger.debug(
            "Catalog request",
            extra={"method": method, "url": url, "payload": json_body},
        )

        try:
            response = self._session.request(
                method=method.upper(),
                url=url,
                headers=headers,
                json=json_body,
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
            )
        except requests.RequestException as exc:
            logger.error("Catalog request failed: %s", exc)
            raise CatalogRequestError(str(exc)) from exc

        if response.status_code == expected_status:
            if not response.content:
                return {}
            try:
                return response.json()
            except json.JSONDecodeError as exc:
                raise CatalogRequestError(
                    f"Invalid JSON response from catalog: {exc}"
                ) from exc

        if response.status_code in (401, 403):
            raise CatalogAuthError(
                "Catalog authentication failed", status_code=response.status_code
            )

        if response.status_code == 404:
            raise InstanceNotFoundError(
                f"{method.upper()} {path} not found", status_code=404
            )

        detail = response.text or "Unknown error"
        raise CatalogRequestError(detail, status_code=response.status_code)

    def _to_instance(self, payload: dict[str, Any]) -> ServiceInstance:
        try:
            return ServiceInstance.model_validate(payload)
        except ModelValidationError as exc:
            raise CatalogRequestError(
                f"Unexpected ServiceInstance from catalog: {exc}"
            ) from exc

    # ------------------------------------------------------------------
    # High-level helpers
    # ------------------------------------------------------------------

    def provision(
        self,
        instance_name: str,
        class_name: str,
        plan_name: str,
        opts: ProvisionOptions,
    ) -> ServiceInstance:
        """Create a ServiceInstance and return the catalog's initial view of it."""

        body = build_instance_body(instance_name, class_name, plan_name, opts)
        payload = self._request(
            "POST",
            self._instances_path(opts.namespace),
            json_body=body,
            expected_status=201,
        )
        logger.info(
            "Provision requested for %s/%s (class=%s plan=%s)",
            opts.namespace,
            instance_name,
            class_name,
            plan_name,
        )
        return self._to_instance(payload)

    def retrieve_instance(self, namespace: str, name: str) -> ServiceInstance:
        """Fetch the current state of an instance."""

        payload = self._request("GET", self._instances_path(namespace, name))
        return self._to_instance(payload)
