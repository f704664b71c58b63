"""Type definitions for ecs-pilot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class Cluster:
    name: str
    arn: str
    status: str
    running_tasks_count: int = 0
    pending_tasks_count: int = 0
    active_services_count: int = 0
    service_count: int = 0
    task_count: int = 0
    container_instance_count: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"


@dataclass(frozen=True)
class Container:
    name: str
    last_status: str
    cpu: str | None = None
    memory: str | None = None


@dataclass(frozen=True)
class Task:
    task_arn: str
    task_id: str
    definition_family: str
    definition_revision: int
    last_status: str
    created_at: datetime | None = None
    containers: tuple[Container, ...] = ()
    desired_status: str | None = None
    launch_type: str | None = None
    enable_execute_command: bool = False

    @property
    def short_id(self) -> str:
        return self.task_id[:8]

    @property
    def definition(self) -> str:
        return f"{self.definition_family}:{self.definition_revision}"


@dataclass(frozen=True)
class Service:
    service_name: str
    service_arn: str
    task_definition_arn: str
    family: str
    revision: int
    status: str
    desired_count: int = 0
    running_count: int = 0
    pending_count: int = 0


@dataclass(frozen=True)
class ContainerDefinition:
    name: str
    image: str
    environment: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class TaskDefinitionRevision:
    arn: str
    family: str
    revision: int
    status: str
    registered_at: datetime | None = None
    cpu: str | None = None
    memory: str | None = None
    container_definitions: tuple[ContainerDefinition, ...] = ()


class DifferenceKind(Enum):
    CPU = "cpu"
    MEMORY = "memory"
    IMAGE = "image"
    ENVIRONMENT = "environment"
    CONTAINER = "container"


@dataclass(frozen=True)
class Difference:
    """A single change a rollback would apply, from current to target."""

    kind: DifferenceKind
    current: str | None
    target: str | None
    container: str | None = None

    def reversed(self) -> Difference:
        return Difference(self.kind, self.target, self.current, self.container)


@dataclass(frozen=True)
class Deployment:
    service_name: str
    task_definition_arn: str
    deployment_id: str | None
    status: str | None
    rollout_state: str | None = None
