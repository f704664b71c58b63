"""Main application logic for ecs-pilot: the exec and rollback flows."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum, auto
from typing import TYPE_CHECKING, TypeVar

from rich.console import Console

from ..features.task.comparison import diff_task_definitions
from .errors import EcsPilotError, NoEligibleRevisions, UserCancelled
from .navigation import Back, Cancelled, NavResult, Recovery, Selected

if TYPE_CHECKING:
    from ..features.container.container import ExecSessionLauncher
    from ..ui import ECSNavigator
    from .types import Container, Service, Task, TaskDefinitionRevision

console = Console()
logger = logging.getLogger(__name__)

T = TypeVar("T")


class ExecState(Enum):
    SELECTING_CLUSTER = auto()
    SELECTING_TASK = auto()
    SELECTING_CONTAINER = auto()
    EXECUTING = auto()
    DONE = auto()


class RollbackState(Enum):
    SELECTING_CLUSTER = auto()
    SELECTING_SERVICE = auto()
    SELECTING_REVISION = auto()
    PREVIEWING_DIFF = auto()
    CONFIRMING_ROLLBACK = auto()
    EXECUTING = auto()
    DONE = auto()


def run_step(navigator: ECSNavigator, step: Callable[[], NavResult[T]], back_text: str | None) -> NavResult[T]:
    """Run one navigation step; a failure becomes a retry / back / exit choice instead of a crash."""
    while True:
        try:
            return step()
        except (UserCancelled, NoEligibleRevisions):
            raise
        except EcsPilotError as e:
            logger.debug("Step failed: %s", e)
            navigator.show_error(e)
            recovery = navigator.select_recovery(allow_retry=True, back_text=back_text)
            if recovery is Recovery.RETRY:
                continue
            if recovery is Recovery.BACK:
                return Back()
            return Cancelled(failed=True)


def say_goodbye() -> None:
    console.print("\n👋 Goodbye!", style="cyan")


def _exit_code_for(result: NavResult[object]) -> int:
    """1 when the flow ends because the user gave up on a failed step."""
    return 1 if isinstance(result, Cancelled) and result.failed else 0


def run_exec_flow(
    navigator: ECSNavigator, launcher: ExecSessionLauncher, preselected_cluster: str | None = None
) -> int:
    """cluster → task → container → exec session.

    Returns the session's exit code; 0 when cancelled, 1 when the user exits after a failed step.
    """
    state = ExecState.SELECTING_TASK if preselected_cluster else ExecState.SELECTING_CLUSTER
    cluster_name = preselected_cluster or ""
    task: Task | None = None
    container: Container | None = None
    exit_code = 0
    # With a preselected cluster there is no level above task selection
    can_leave_tasks = preselected_cluster is None

    while state is not ExecState.DONE:
        if state is ExecState.SELECTING_CLUSTER:
            cluster_result = run_step(navigator, navigator.select_cluster, None)
            if isinstance(cluster_result, Selected):
                cluster_name = cluster_result.value.name
                console.print(f"\n✅ Selected cluster: {cluster_name}", style="green")
                state = ExecState.SELECTING_TASK
            else:
                exit_code = _exit_code_for(cluster_result)
                say_goodbye()
                state = ExecState.DONE

        elif state is ExecState.SELECTING_TASK:
            back_text = "Back to cluster selection" if can_leave_tasks else None
            task_result = run_step(
                navigator, lambda: navigator.select_task(cluster_name, allow_back=can_leave_tasks), back_text
            )
            if isinstance(task_result, Selected):
                task = task_result.value
                state = ExecState.SELECTING_CONTAINER
            elif isinstance(task_result, Back) and can_leave_tasks:
                task = None
                state = ExecState.SELECTING_CLUSTER
            else:
                exit_code = _exit_code_for(task_result)
                say_goodbye()
                state = ExecState.DONE

        elif state is ExecState.SELECTING_CONTAINER:
            assert task is not None
            selected_task = task
            container_result = run_step(
                navigator, lambda: navigator.select_container(selected_task, allow_back=True), "Back to task selection"
            )
            if isinstance(container_result, Selected):
                container = container_result.value
                state = ExecState.EXECUTING
            elif isinstance(container_result, Back):
                task = container = None
                state = ExecState.SELECTING_TASK
            else:
                exit_code = _exit_code_for(container_result)
                say_goodbye()
                state = ExecState.DONE

        elif state is ExecState.EXECUTING:
            assert task is not None and container is not None
            selected_task, selected_container = task, container
            session_result = run_step(
                navigator,
                lambda: _start_session(navigator, launcher, cluster_name, selected_task, selected_container),
                "Back to container selection",
            )
            if isinstance(session_result, Selected):
                exit_code = session_result.value
                console.print(f"\nSession ended (exit code {exit_code})", style="dim")
                state = ExecState.DONE
            elif isinstance(session_result, Back):
                container = None
                state = ExecState.SELECTING_CONTAINER
            else:
                exit_code = _exit_code_for(session_result)
                say_goodbye()
                state = ExecState.DONE

    return exit_code


def _start_session(
    navigator: ECSNavigator, launcher: ExecSessionLauncher, cluster_name: str, task: Task, container: Container
) -> NavResult[int]:
    target = navigator.prepare_exec_target(cluster_name, task, container)
    console.print(f"\n🚀 Connecting to '{container.name}' in task {task.short_id}...", style="cyan")
    return Selected(launcher.run(target))


def run_rollback_flow(navigator: ECSNavigator, preselected_cluster: str | None = None) -> int:
    """cluster → service → revision → diff → confirm → a single UpdateService call."""
    state = RollbackState.SELECTING_SERVICE if preselected_cluster else RollbackState.SELECTING_CLUSTER
    cluster_name = preselected_cluster or ""
    service: Service | None = None
    target: TaskDefinitionRevision | None = None
    exit_code = 0
    can_leave_services = preselected_cluster is None

    while state is not RollbackState.DONE:
        if state is RollbackState.SELECTING_CLUSTER:
            cluster_result = run_step(navigator, navigator.select_cluster, None)
            if isinstance(cluster_result, Selected):
                cluster_name = cluster_result.value.name
                console.print(f"\n✅ Selected cluster: {cluster_name}", style="green")
                state = RollbackState.SELECTING_SERVICE
            else:
                exit_code = _exit_code_for(cluster_result)
                say_goodbye()
                state = RollbackState.DONE

        elif state is RollbackState.SELECTING_SERVICE:
            back_text = "Back to cluster selection" if can_leave_services else None
            service_result = run_step(
                navigator, lambda: navigator.select_service(cluster_name, allow_back=can_leave_services), back_text
            )
            if isinstance(service_result, Selected):
                service = service_result.value
                state = RollbackState.SELECTING_REVISION
            elif isinstance(service_result, Back) and can_leave_services:
                service = None
                state = RollbackState.SELECTING_CLUSTER
            else:
                exit_code = _exit_code_for(service_result)
                say_goodbye()
                state = RollbackState.DONE

        elif state is RollbackState.SELECTING_REVISION:
            assert service is not None
            selected_service = service
            try:
                revision_result = run_step(
                    navigator, lambda: navigator.select_revision(selected_service), "Back to service selection"
                )
            except NoEligibleRevisions as e:
                navigator.show_info(f"ℹ️ {e.message}. Nothing to roll back to.")
                state = RollbackState.DONE
                continue

            if isinstance(revision_result, Selected):
                target = revision_result.value
                state = RollbackState.PREVIEWING_DIFF
            elif isinstance(revision_result, Back):
                service = target = None
                state = RollbackState.SELECTING_SERVICE
            else:
                exit_code = _exit_code_for(revision_result)
                say_goodbye()
                state = RollbackState.DONE

        elif state is RollbackState.PREVIEWING_DIFF:
            assert service is not None and target is not None
            selected_service, selected_target = service, target
            comparison_result = run_step(
                navigator,
                lambda: Selected(navigator.load_comparison(selected_service, selected_target)),
                "Back to revision selection",
            )
            if isinstance(comparison_result, Selected):
                current_definition, target_definition = comparison_result.value
                differences = diff_task_definitions(current_definition, target_definition)
                navigator.display_differences(current_definition, target_definition, differences)
                state = RollbackState.CONFIRMING_ROLLBACK
            elif isinstance(comparison_result, Back):
                target = None
                state = RollbackState.SELECTING_REVISION
            else:
                exit_code = _exit_code_for(comparison_result)
                say_goodbye()
                state = RollbackState.DONE

        elif state is RollbackState.CONFIRMING_ROLLBACK:
            assert service is not None and target is not None
            if navigator.confirm_rollback(cluster_name, service, target):
                state = RollbackState.EXECUTING
            elif navigator.ask_select_different_revision():
                target = None
                state = RollbackState.SELECTING_REVISION
            else:
                say_goodbye()
                state = RollbackState.DONE

        elif state is RollbackState.EXECUTING:
            assert service is not None and target is not None
            try:
                deployment = navigator.rollback_service(cluster_name, service, target)
            except UserCancelled:
                raise
            except EcsPilotError as e:
                # The update is never retried in place; another attempt goes through selection again
                navigator.show_error(e)
                recovery = navigator.select_recovery(allow_retry=False, back_text="Start over")
                if recovery is Recovery.BACK:
                    service = target = None
                    state = RollbackState.SELECTING_CLUSTER if can_leave_services else RollbackState.SELECTING_SERVICE
                else:
                    exit_code = 1
                    state = RollbackState.DONE
                continue

            navigator.display_deployment(deployment)
            state = RollbackState.DONE

    return exit_code
