"""AWS ECS service layer - handles all AWS API interactions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .core.types import Deployment, Task
from .features.cluster.cluster import ClusterService
from .features.service.actions import ServiceActions
from .features.service.service import ServiceService
from .features.task.comparison import TaskComparisonService
from .features.task.task import TaskService

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient


class ECSService:
    """Service for interacting with AWS ECS.

    The feature services share one client; UI components are built on top of them.
    """

    def __init__(self, ecs_client: ECSClient) -> None:
        self.ecs_client = ecs_client
        self.clusters = ClusterService(ecs_client)
        self.services = ServiceService(ecs_client)
        self.service_actions = ServiceActions(ecs_client)
        self.tasks = TaskService(ecs_client)
        self.comparison = TaskComparisonService(ecs_client)

    def get_region(self) -> str:
        return self.ecs_client.meta.region_name

    def get_task_details(self, cluster_name: str, task_arn: str) -> Task:
        return self.tasks.get_task_details(cluster_name, task_arn)

    def rollback_service(self, cluster_name: str, service_name: str, task_definition_arn: str) -> Deployment:
        return self.service_actions.rollback_service(cluster_name, service_name, task_definition_arn)
