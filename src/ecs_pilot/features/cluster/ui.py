"""UI components for cluster operations."""

from __future__ import annotations

from rich.console import Console

from ...core.base import BaseUIComponent
from ...core.navigation import Cancelled, NavResult, select_with_auto_pagination
from ...core.types import Cluster
from ...core.utils import print_warning, show_spinner
from .cluster import ClusterService

console = Console()


def format_cluster_choice(cluster: Cluster) -> str:
    status_icon = "🟢" if cluster.is_active else "⚪"
    details = f"{cluster.running_tasks_count} running"
    if cluster.pending_tasks_count:
        details += f", {cluster.pending_tasks_count} pending"
    details += f", {cluster.service_count} services"
    if cluster.container_instance_count:
        details += f", {cluster.container_instance_count} instances"
    return f"{status_icon} {cluster.name} ({details})"


class ClusterUI(BaseUIComponent):
    """UI component for cluster selection and display."""

    def __init__(self, cluster_service: ClusterService) -> None:
        super().__init__()
        self.cluster_service = cluster_service

    def select_cluster(self) -> NavResult[Cluster]:
        with show_spinner("Loading clusters..."):
            clusters = self.cluster_service.list_clusters()

        if not clusters:
            print_warning("No ECS clusters found in this account and region")
            return Cancelled()

        choices = [{"name": format_cluster_choice(cluster), "value": cluster} for cluster in clusters]

        return select_with_auto_pagination("Select an ECS cluster:", choices, None)
