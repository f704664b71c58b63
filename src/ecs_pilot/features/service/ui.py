"""UI components for service operations."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ...core.base import BaseUIComponent
from ...core.navigation import NavResult, confirm, select_with_navigation
from ...core.types import Deployment, Service, TaskDefinitionRevision
from ...core.utils import print_success, print_warning, show_spinner
from .service import ServiceService, get_service_health

console = Console()


def format_service_choice(service: Service) -> str:
    icon, _status = get_service_health(service)
    return (
        f"{icon} {service.service_name} ({service.running_count}/{service.desired_count}) "
        f"{service.family}:{service.revision}"
    )


class ServiceUI(BaseUIComponent):
    """UI component for service selection and rollback prompts."""

    def __init__(self, service_service: ServiceService) -> None:
        super().__init__()
        self.service_service = service_service

    def select_service(self, cluster_name: str, allow_back: bool = True) -> NavResult[Service]:
        """Interactive service selection with status information and navigation."""
        with show_spinner("Loading services..."):
            services = self.service_service.list_services(cluster_name)

        back_text = "Back to cluster selection" if allow_back else None
        if not services:
            print_warning(f"No services found in cluster '{cluster_name}'")
            return select_with_navigation("What would you like to do?", [], back_text)

        choices = [{"name": format_service_choice(service), "value": service} for service in services]

        return self.select_with_nav(f"Select a service in '{cluster_name}':", choices, back_text)

    def confirm_rollback(self, cluster_name: str, service: Service, target: TaskDefinitionRevision) -> bool:
        return confirm(
            f"Roll back service '{service.service_name}' in cluster '{cluster_name}' "
            f"from revision {service.revision} to {target.revision}?",
            default=False,
        )

    def ask_select_different_revision(self) -> bool:
        return confirm("Select a different revision?", default=True)

    def display_deployment(self, deployment: Deployment) -> None:
        print_success(f"Rollback started for service '{deployment.service_name}'")

        table = Table(show_header=False, box=None)
        table.add_column("Field", style="dim")
        table.add_column("Value", style="white")
        table.add_row("Task definition", deployment.task_definition_arn.split("/")[-1])
        table.add_row("Deployment", deployment.deployment_id or "unknown")
        table.add_row("Status", deployment.status or "unknown")
        if deployment.rollout_state:
            table.add_row("Rollout state", deployment.rollout_state)
        console.print(table)
        console.print("The deployment continues in the background; check the ECS console for progress.", style="dim")
