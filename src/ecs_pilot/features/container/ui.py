"""UI components for container operations."""

from __future__ import annotations

from rich.console import Console

from ...core.base import BaseUIComponent
from ...core.navigation import NavResult, Selected
from ...core.types import Container, Task
from ...core.utils import print_info

console = Console()


def format_container_choice(container: Container) -> str:
    details = [container.last_status]
    if container.cpu and container.cpu != "0":
        details.append(f"cpu {container.cpu}")
    if container.memory:
        details.append(f"mem {container.memory}")
    return f"📦 {container.name} ({', '.join(details)})"


class ContainerUI(BaseUIComponent):
    """UI component for container selection."""

    def select_container(self, task: Task, allow_back: bool = True) -> NavResult[Container]:
        """Pick a container of the task.

        A single container is chosen without prompting only when there is no back level
        to offer; otherwise the prompt is shown so the user can still go back.
        """
        if len(task.containers) == 1 and not allow_back:
            container = task.containers[0]
            print_info(f"Auto-selected single container: {container.name}")
            return Selected(container)

        choices = [{"name": format_container_choice(container), "value": container} for container in task.containers]
        back_text = "Back to task selection" if allow_back else None

        return self.select_with_nav(f"Select a container in task {task.short_id}:", choices, back_text)
