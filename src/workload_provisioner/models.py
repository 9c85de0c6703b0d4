"""Pydantic v2 models for workload intents, descriptors, and creation results."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from kubernetes.utils import parse_quantity
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from workload_provisioner.validation import validate_base_name, validate_labels, validate_namespace

QOS_GUARANTEED = "Guaranteed"
QOS_BURSTABLE = "Burstable"
QOS_BEST_EFFORT = "BestEffort"


# --- Intent ---


class WorkloadIntent(BaseModel):
    """Caller-supplied description of the workload to provision."""

    model_config = ConfigDict(frozen=True)

    base_name: str
    labels: dict[str, str]

    @field_validator("base_name")
    @classmethod
    def _check_base_name(cls, value: str) -> str:
        validate_base_name(value)
        return value

    @field_validator("labels")
    @classmethod
    def _check_labels(cls, value: dict[str, str]) -> dict[str, str]:
        validate_labels(value)
        return value

    @classmethod
    def for_app(cls, name: str) -> WorkloadIntent:
        """Build an intent selected by the conventional ``app`` label."""
        return cls(base_name=name, labels={"app": name})


# --- Descriptor ---


class ResourceBound(BaseModel):
    """Paired request and limit for one resource kind, e.g. cpu or memory."""

    model_config = ConfigDict(frozen=True)

    request: str
    limit: str

    @model_validator(mode="after")
    def _request_within_limit(self) -> ResourceBound:
        try:
            request = parse_quantity(self.request)
            limit = parse_quantity(self.limit)
        except ValueError as e:
            msg = f"Invalid resource quantity: {e}"
            raise ValueError(msg) from e
        if request > limit:
            msg = f"Resource request {self.request!r} exceeds limit {self.limit!r}."
            raise ValueError(msg)
        return self

    @property
    def is_guaranteed(self) -> bool:
        return parse_quantity(self.request) == parse_quantity(self.limit)


class ContainerPort(BaseModel):
    """A single port exposed by a container."""

    model_config = ConfigDict(frozen=True)

    name: str
    container_port: int = Field(ge=1, le=65535)
    protocol: Literal["TCP", "UDP", "SCTP"] = "TCP"


class ContainerSpec(BaseModel):
    """The container run by every replica of the workload."""

    model_config = ConfigDict(frozen=True)

    name: str
    image: str
    resources: dict[str, ResourceBound]
    ports: list[ContainerPort] = Field(default_factory=list)


class WorkloadDescriptor(BaseModel):
    """Complete, submittable description of a Deployment.

    ``name_prefix`` is handed to the API server as ``generateName``; the final
    name is only known once the object has been created. Selector and pod
    template labels are both read from the single immutable ``labels`` field.
    """

    model_config = ConfigDict(frozen=True)

    name_prefix: str
    namespace: str
    labels: tuple[tuple[str, str], ...]
    container: ContainerSpec
    replicas: int = Field(ge=0)

    @field_validator("name_prefix")
    @classmethod
    def _check_name_prefix(cls, value: str) -> str:
        if not value.endswith("-"):
            msg = f"Invalid name prefix: {value!r}. Must end with '-' for server-side name generation."
            raise ValueError(msg)
        validate_base_name(value[:-1])
        return value

    @field_validator("namespace")
    @classmethod
    def _check_namespace(cls, value: str) -> str:
        validate_namespace(value)
        return value

    @field_validator("labels", mode="before")
    @classmethod
    def _freeze_labels(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return tuple(sorted(value.items()))
        return value

    @field_validator("labels")
    @classmethod
    def _check_labels(cls, value: tuple[tuple[str, str], ...]) -> tuple[tuple[str, str], ...]:
        labels = dict(value)
        if len(labels) != len(value):
            msg = "Duplicate label keys in workload labels."
            raise ValueError(msg)
        validate_labels(labels)
        return value

    @property
    def selector_labels(self) -> dict[str, str]:
        """Labels the Deployment selects its pods by. Always equal to ``template_labels``."""
        return dict(self.labels)

    @property
    def template_labels(self) -> dict[str, str]:
        """Labels stamped on the pod template."""
        return dict(self.labels)

    @property
    def qos_class(self) -> str:
        """QoS class the scheduler will assign to the pods."""
        if not self.container.resources:
            return QOS_BEST_EFFORT
        if all(bound.is_guaranteed for bound in self.container.resources.values()):
            return QOS_GUARANTEED
        return QOS_BURSTABLE


# --- Creation result ---


class CreatedWorkload(BaseModel):
    """The Deployment as accepted by the API server."""

    name: str
    namespace: str
    name_prefix: str
    uid: str | None = None
