"""UI components for task operations."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ...core.base import BaseUIComponent
from ...core.errors import NoEligibleRevisions, NoRunningTasks
from ...core.navigation import NavResult, select_with_navigation
from ...core.types import Difference, DifferenceKind, Service, Task, TaskDefinitionRevision
from ...core.utils import format_time_ago, print_warning, show_spinner
from .comparison import TaskComparisonService
from .task import TaskService

console = Console()

_DIFFERENCE_DISPLAY = {
    DifferenceKind.CPU: ("💻", "Task CPU"),
    DifferenceKind.MEMORY: ("🧠", "Task memory"),
    DifferenceKind.IMAGE: ("🐳", "Image ({container})"),
    DifferenceKind.ENVIRONMENT: ("🔄", "Environment variables ({container})"),
    DifferenceKind.CONTAINER: ("📦", "Container '{container}'"),
}


def format_task_choice(task: Task) -> str:
    containers = ", ".join(container.name for container in task.containers) or "no containers"
    return (
        f"{task.short_id} {task.definition} [{task.last_status}] "
        f"{format_time_ago(task.created_at)} ({containers})"
    )


def format_revision_choice(revision: TaskDefinitionRevision) -> str:
    images = ", ".join(container.image.split("/")[-1] for container in revision.container_definitions)
    registered = format_time_ago(revision.registered_at) if revision.registered_at else "unknown date"
    return f"📄 {revision.family}:{revision.revision} ({registered}) {images}"


def describe_difference_values(difference: Difference) -> tuple[str, str]:
    if difference.kind is DifferenceKind.ENVIRONMENT:
        return "changed", ""
    if difference.kind is DifferenceKind.CONTAINER:
        return (difference.current or "(absent)", difference.target or "(absent)")
    return (difference.current or "(not set)", difference.target or "(not set)")


class TaskUI(BaseUIComponent):
    """UI component for task and revision selection."""

    def __init__(self, task_service: TaskService, comparison_service: TaskComparisonService) -> None:
        super().__init__()
        self.task_service = task_service
        self.comparison_service = comparison_service

    def select_task(self, cluster_name: str, allow_back: bool = True) -> NavResult[Task]:
        """Pick a running task; the task list is fetched fresh on every call."""
        with show_spinner("Loading tasks..."):
            tasks = self.task_service.list_tasks(cluster_name)

        if not tasks:
            if not allow_back:
                raise NoRunningTasks(f"No running tasks in cluster '{cluster_name}'", cluster=cluster_name)
            print_warning(f"No running tasks in cluster '{cluster_name}'")
            return select_with_navigation("What would you like to do?", [], "Go back to cluster selection")

        choices = [{"name": format_task_choice(task), "value": task} for task in tasks]
        back_text = "Back to cluster selection" if allow_back else None

        return self.select_with_nav(f"Select a task in '{cluster_name}':", choices, back_text)

    def select_revision(self, service: Service) -> NavResult[TaskDefinitionRevision]:
        """Pick the rollback target among the family's revisions, never the one the service runs."""
        with show_spinner("Loading task definition revisions..."):
            revisions = self.comparison_service.list_task_definition_revisions(service.family)

        eligible = [revision for revision in revisions if revision.revision != service.revision]
        if not eligible:
            raise NoEligibleRevisions(
                f"Service '{service.service_name}' has no other revision of '{service.family}' to roll back to",
                service=service.service_name,
                family=service.family,
            )

        console.print(f"Current revision: {service.family}:{service.revision}", style="dim")
        choices = [{"name": format_revision_choice(revision), "value": revision} for revision in eligible]

        return self.select_with_nav("Select the revision to roll back to:", choices, "Back to service selection")

    def load_comparison(
        self, service: Service, target: TaskDefinitionRevision
    ) -> tuple[TaskDefinitionRevision, TaskDefinitionRevision]:
        with show_spinner("Loading task definitions..."):
            return self.comparison_service.get_task_definitions_for_comparison(service.task_definition_arn, target.arn)

    def display_differences(
        self, current: TaskDefinitionRevision, target: TaskDefinitionRevision, differences: list[Difference]
    ) -> None:
        console.print(
            f"\nComparing {current.family}:{current.revision} (current) → {target.family}:{target.revision}",
            style="bold cyan",
        )

        if not differences:
            console.print("No significant changes between these revisions.", style="green")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Change", style="cyan")
        table.add_column("Current", style="red")
        table.add_column("Target", style="green")

        for difference in differences:
            icon, label = _DIFFERENCE_DISPLAY[difference.kind]
            current_value, target_value = describe_difference_values(difference)
            table.add_row(f"{icon} {label.format(container=difference.container)}", current_value, target_value)

        console.print(table)
