"""Pydantic models for ServiceInstance snapshots returned by the catalog."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

READY = "Ready"
FAILED = "Failed"


class _CatalogModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class InstanceCondition(_CatalogModel):
    type: str = Field(..., description="Condition type (Ready, Failed, ...)")
    status: str = Field(default="Unknown", description="True, False or Unknown")
    reason: str | None = None
    message: str | None = None
    last_transition_time: str | None = Field(default=None, alias="lastTransitionTime")


class InstanceMetadata(_CatalogModel):
    name: str
    namespace: str = ""
    uid: str | None = None
    creation_timestamp: str | None = Field(default=None, alias="creationTimestamp")


class InstanceSpec(_CatalogModel):
    class_external_name: str | None = Field(
        default=None, alias="clusterServiceClassExternalName"
    )
    plan_external_name: str | None = Field(
        default=None, alias="clusterServicePlanExternalName"
    )
    external_id: str | None = Field(default=None, alias="externalID")
    parameters: dict[str, Any] | None = None
    parameters_from: list[dict[str, Any]] = Field(
        default_factory=list, alias="parametersFrom"
    )


class InstanceStatus(_CatalogModel):
    conditions: list[InstanceCondition] = Field(default_factory=list)
    async_op_in_progress: bool = Field(default=False, alias="asyncOpInProgress")
    provision_status: str | None = Field(default=None, alias="provisionStatus")


class ServiceInstance(_CatalogModel):
    """Point-in-time view of a service instance."""

    metadata: InstanceMetadata
    spec: InstanceSpec = Field(default_factory=InstanceSpec)
    status: InstanceStatus = Field(default_factory=InstanceStatus)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    def _condition_is_true(self, condition_type: str) -> bool:
        return any(
            cond.type == condition_type and cond.status == "True"
            for cond in self.status.conditions
        )

    @property
    def is_ready(self) -> bool:
        return self._condition_is_true(READY)

    @property
    def is_failed(self) -> bool:
        return self._condition_is_true(FAILED)

    @property
    def is_terminal(self) -> bool:
        """Ready or failed, with no asynchronous operation still running."""

        return (self.is_ready or self.is_failed) and not self.status.async_op_in_progress

    def status_summary(self) -> str:
        """Describe the most recent condition, e.g. ``Ready - The instance was provisioned``."""

        if not self.status.conditions:
            return ""
        last = self.status.conditions[-1]
        label = last.type if last.status == "True" else f"Not{last.type}"
        if last.message:
            return f"{label} - {last.message}"
        return label
