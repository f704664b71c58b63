"""UI layer - handles all user interaction and display logic."""

from __future__ import annotations

from rich.console import Console

from .aws_service import ECSService
from .core.base import BaseUIComponent
from .core.errors import EcsPilotError, ErrorCode, ResourceNotFound
from .core.navigation import NavResult, Recovery, select_recovery
from .core.types import Cluster, Container, Deployment, Difference, Service, Task, TaskDefinitionRevision
from .core.utils import print_error, print_info, print_warning, show_spinner
from .features.cluster.ui import ClusterUI
from .features.container.models import ExecTarget
from .features.container.ui import ContainerUI
from .features.service.ui import ServiceUI
from .features.task.ui import TaskUI

console = Console()


class ECSNavigator(BaseUIComponent):
    """Navigator for interactive ECS exploration."""

    def __init__(self, ecs_service: ECSService) -> None:
        super().__init__()
        self.ecs_service = ecs_service
        self._cluster_ui = ClusterUI(ecs_service.clusters)
        self._service_ui = ServiceUI(ecs_service.services)
        self._task_ui = TaskUI(ecs_service.tasks, ecs_service.comparison)
        self._container_ui = ContainerUI()

    def select_cluster(self) -> NavResult[Cluster]:
        """Interactive cluster selection."""
        return self._cluster_ui.select_cluster()

    def select_service(self, cluster_name: str, allow_back: bool = True) -> NavResult[Service]:
        return self._service_ui.select_service(cluster_name, allow_back)

    def select_task(self, cluster_name: str, allow_back: bool = True) -> NavResult[Task]:
        return self._task_ui.select_task(cluster_name, allow_back)

    def select_container(self, task: Task, allow_back: bool = True) -> NavResult[Container]:
        return self._container_ui.select_container(task, allow_back)

    def select_revision(self, service: Service) -> NavResult[TaskDefinitionRevision]:
        return self._task_ui.select_revision(service)

    def load_comparison(
        self, service: Service, target: TaskDefinitionRevision
    ) -> tuple[TaskDefinitionRevision, TaskDefinitionRevision]:
        return self._task_ui.load_comparison(service, target)

    def display_differences(
        self, current: TaskDefinitionRevision, target: TaskDefinitionRevision, differences: list[Difference]
    ) -> None:
        self._task_ui.display_differences(current, target, differences)

    def confirm_rollback(self, cluster_name: str, service: Service, target: TaskDefinitionRevision) -> bool:
        return self._service_ui.confirm_rollback(cluster_name, service, target)

    def ask_select_different_revision(self) -> bool:
        return self._service_ui.ask_select_different_revision()

    def rollback_service(self, cluster_name: str, service: Service, target: TaskDefinitionRevision) -> Deployment:
        with show_spinner("Updating service..."):
            return self.ecs_service.rollback_service(cluster_name, service.service_name, target.arn)

    def display_deployment(self, deployment: Deployment) -> None:
        self._service_ui.display_deployment(deployment)

    def prepare_exec_target(self, cluster_name: str, task: Task, container: Container) -> ExecTarget:
        """Re-check the task right before connecting; it may have stopped while the user was choosing."""
        with show_spinner("Checking task..."):
            current = self.ecs_service.get_task_details(cluster_name, task.task_arn)

        if container.name not in {c.name for c in current.containers}:
            raise ResourceNotFound(
                f"Container '{container.name}' is no longer part of task {task.short_id}",
                ErrorCode.CONTAINER_NOT_FOUND,
            )
        if current.last_status != "RUNNING":
            print_warning(f"Task {task.short_id} is {current.last_status}, the session may fail")
        if not current.enable_execute_command:
            print_warning(f"ECS Exec is not enabled for task {task.short_id}, the session will likely be refused")

        return ExecTarget(cluster_name, task.task_arn, container.name)

    def show_error(self, error: EcsPilotError) -> None:
        print_error(error.user_message)
        if error.message != error.user_message:
            console.print(f"   {error.message}", style="dim")

    def show_info(self, message: str) -> None:
        print_info(message)

    def select_recovery(self, allow_retry: bool = True, back_text: str | None = "Go back") -> Recovery:
        return select_recovery(allow_retry, back_text)
