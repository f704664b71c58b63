"""Task definition revisions and the diff shown before a rollback."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from ...core.base import MAX_CONCURRENT_REQUESTS, BaseAWSService
from ...core.errors import EcsPilotError, translate_aws_errors
from ...core.types import ContainerDefinition, Difference, DifferenceKind, TaskDefinitionRevision
from ...core.utils import parse_task_definition_arn

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient
    from mypy_boto3_ecs.type_defs import TaskDefinitionTypeDef

logger = logging.getLogger(__name__)

MAX_REVISIONS = 10


def normalize_task_definition(raw_task_def: dict[str, Any] | TaskDefinitionTypeDef) -> TaskDefinitionRevision:
    """Keep only the fields a rollback comparison cares about."""
    containers = tuple(
        ContainerDefinition(
            name=container_def["name"],
            image=container_def.get("image", ""),
            environment=tuple(
                (item["name"], item.get("value", "")) for item in container_def.get("environment", [])
            ),
        )
        for container_def in raw_task_def.get("containerDefinitions", [])
    )

    return TaskDefinitionRevision(
        arn=raw_task_def["taskDefinitionArn"],
        family=raw_task_def["family"],
        revision=int(raw_task_def["revision"]),
        status=raw_task_def.get("status", "UNKNOWN"),
        registered_at=raw_task_def.get("registeredAt"),
        cpu=raw_task_def.get("cpu"),
        memory=raw_task_def.get("memory"),
        container_definitions=containers,
    )


def diff_task_definitions(current: TaskDefinitionRevision, target: TaskDefinitionRevision) -> list[Difference]:
    """Differences a switch from current to target would apply.

    Order: cpu, memory, then image/environment per container of current, then
    containers only one side has (current's first, then target's).
    """
    differences: list[Difference] = []

    if current.cpu != target.cpu:
        differences.append(Difference(DifferenceKind.CPU, current.cpu, target.cpu))
    if current.memory != target.memory:
        differences.append(Difference(DifferenceKind.MEMORY, current.memory, target.memory))

    target_by_name = {c.name: c for c in target.container_definitions}
    current_names = {c.name for c in current.container_definitions}

    for container in current.container_definitions:
        other = target_by_name.get(container.name)
        if other is None:
            continue
        if container.image != other.image:
            differences.append(Difference(DifferenceKind.IMAGE, container.image, other.image, container.name))
        if container.environment != other.environment:
            differences.append(Difference(DifferenceKind.ENVIRONMENT, None, None, container.name))

    for container in current.container_definitions:
        if container.name not in target_by_name:
            differences.append(Difference(DifferenceKind.CONTAINER, container.image, None, container.name))
    for container in target.container_definitions:
        if container.name not in current_names:
            differences.append(Difference(DifferenceKind.CONTAINER, None, container.image, container.name))

    return differences


class TaskComparisonService(BaseAWSService):
    """Service for task definition revision lookups."""

    def __init__(self, ecs_client: ECSClient) -> None:
        super().__init__(ecs_client)

    def list_task_definition_revisions(self, family: str, limit: int = MAX_REVISIONS) -> list[TaskDefinitionRevision]:
        """Most recent ACTIVE revisions of a family, newest first.

        Revisions that fail to describe are left out rather than failing the whole list.
        """
        with translate_aws_errors(f"List revisions of '{family}'"):
            response = self.ecs_client.list_task_definitions(
                familyPrefix=family, status="ACTIVE", sort="DESC", maxResults=limit
            )
        task_def_arns = [arn for arn in response.get("taskDefinitionArns", []) if _family_of(arn) == family]

        with ThreadPoolExecutor(max_workers=MAX_CONCURRENT_REQUESTS) as executor:
            described = list(executor.map(self._describe_or_none, task_def_arns))

        revisions = [revision for revision in described if revision is not None]
        revisions.sort(key=lambda r: r.revision, reverse=True)
        return revisions[:limit]

    def get_task_definition(self, task_definition_arn: str) -> TaskDefinitionRevision:
        with translate_aws_errors(f"Describe task definition '{task_definition_arn.split('/')[-1]}'"):
            response = self.ecs_client.describe_task_definition(taskDefinition=task_definition_arn)
        return normalize_task_definition(response["taskDefinition"])

    def get_task_definitions_for_comparison(
        self, current_arn: str, target_arn: str
    ) -> tuple[TaskDefinitionRevision, TaskDefinitionRevision]:
        return self.get_task_definition(current_arn), self.get_task_definition(target_arn)

    def _describe_or_none(self, task_definition_arn: str) -> TaskDefinitionRevision | None:
        try:
            return self.get_task_definition(task_definition_arn)
        except EcsPilotError as e:
            logger.warning("Skipping %s: %s", task_definition_arn, e)
            return None


def _family_of(task_definition_arn: str) -> str | None:
    try:
        return parse_task_definition_arn(task_definition_arn)[0]
    except EcsPilotError:
        return None
