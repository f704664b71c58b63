"""Task operations for ECS."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...core.base import BaseAWSService
from ...core.errors import ErrorCode, ResourceNotFound, translate_aws_errors
from ...core.types import Container, Task
from ...core.utils import chunked, extract_name_from_arn, paginate_aws_list, parse_task_definition_arn

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient
    from mypy_boto3_ecs.type_defs import TaskTypeDef

logger = logging.getLogger(__name__)

DESCRIBE_TASKS_BATCH = 100


class TaskService(BaseAWSService):
    """Service for ECS task operations."""

    def __init__(self, ecs_client: ECSClient) -> None:
        super().__init__(ecs_client)

    def list_task_arns(self, cluster_name: str, status: str = "RUNNING", service_name: str | None = None) -> list[str]:
        kwargs = {"cluster": cluster_name, "desiredStatus": status}
        if service_name:
            kwargs["serviceName"] = service_name
        return paginate_aws_list(self.ecs_client, "list_tasks", "taskArns", **kwargs)

    def list_tasks(self, cluster_name: str, status: str = "RUNNING", service_name: str | None = None) -> list[Task]:
        """Tasks in the cluster, newest first. Tasks without a creation time go last."""
        with translate_aws_errors(f"List tasks in cluster '{cluster_name}'"):
            task_arns = self.list_task_arns(cluster_name, status, service_name)
            if not task_arns:
                return []

            raw_tasks: list[TaskTypeDef] = []
            for batch in chunked(task_arns, DESCRIBE_TASKS_BATCH):
                response = self.ecs_client.describe_tasks(cluster=cluster_name, tasks=batch)
                raw_tasks.extend(response.get("tasks", []))

        logger.debug("Described %d of %d tasks in %s", len(raw_tasks), len(task_arns), cluster_name)
        return sort_tasks_newest_first([_create_task(task) for task in raw_tasks])

    def get_task_details(self, cluster_name: str, task_arn: str) -> Task:
        with translate_aws_errors(f"Describe task '{extract_name_from_arn(task_arn)}'"):
            response = self.ecs_client.describe_tasks(cluster=cluster_name, tasks=[task_arn])

        tasks = response.get("tasks", [])
        if not tasks:
            raise ResourceNotFound(
                f"Task '{extract_name_from_arn(task_arn)}' not found in cluster '{cluster_name}'",
                ErrorCode.TASK_NOT_FOUND,
                cluster=cluster_name,
                task_arn=task_arn,
            )
        return _create_task(tasks[0])


def sort_tasks_newest_first(tasks: list[Task]) -> list[Task]:
    dated = sorted((task for task in tasks if task.created_at), key=lambda task: task.created_at, reverse=True)
    undated = [task for task in tasks if task.created_at is None]
    return dated + undated


def _create_task(task: TaskTypeDef) -> Task:
    task_arn = task["taskArn"]
    family, revision = parse_task_definition_arn(task["taskDefinitionArn"])

    containers = tuple(
        Container(
            name=container["name"],
            last_status=container.get("lastStatus", "UNKNOWN"),
            cpu=container.get("cpu"),
            memory=container.get("memory") or container.get("memoryReservation"),
        )
        for container in task.get("containers", [])
    )

    return Task(
        task_arn=task_arn,
        task_id=extract_name_from_arn(task_arn),
        definition_family=family,
        definition_revision=revision,
        last_status=task.get("lastStatus", "UNKNOWN"),
        created_at=task.get("createdAt"),
        containers=containers,
        desired_status=task.get("desiredStatus"),
        launch_type=task.get("launchType"),
        enable_execute_command=task.get("enableExecuteCommand", False),
    )
