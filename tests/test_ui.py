"""Tests for the ECSNavigator facade."""

from unittest.mock import Mock, patch

import pytest

from ecs_pilot.core.errors import ErrorCode, ProviderError, ResourceNotFound
from ecs_pilot.features.container.models import ExecTarget
from ecs_pilot.ui import ECSNavigator
from factories import make_revision, make_service, make_task


@pytest.fixture
def navigator():
    return ECSNavigator(Mock())


def test_prepare_exec_target(navigator):
    task = make_task(containers=("web", "sidecar"))
    navigator.ecs_service.get_task_details.return_value = task

    target = navigator.prepare_exec_target("production", task, task.containers[1])

    assert target == ExecTarget("production", task.task_arn, "sidecar")
    navigator.ecs_service.get_task_details.assert_called_once_with("production", task.task_arn)


def test_prepare_exec_target_container_gone(navigator):
    task = make_task(containers=("web", "sidecar"))
    navigator.ecs_service.get_task_details.return_value = make_task(containers=("web",))

    with pytest.raises(ResourceNotFound) as exc_info:
        navigator.prepare_exec_target("production", task, task.containers[1])

    assert exc_info.value.code is ErrorCode.CONTAINER_NOT_FOUND


@patch("ecs_pilot.ui.print_warning")
def test_prepare_exec_target_warns_about_stopping_task(mock_warning, navigator):
    task = make_task()
    navigator.ecs_service.get_task_details.return_value = make_task(
        last_status="DEPROVISIONING", enable_execute_command=False
    )

    navigator.prepare_exec_target("production", task, task.containers[0])

    assert mock_warning.call_count == 2


def test_rollback_service_passes_target_arn(navigator):
    service = make_service(revision=7)
    target = make_revision(5)

    navigator.rollback_service("production", service, target)

    navigator.ecs_service.rollback_service.assert_called_once_with("production", "web-api", target.arn)


@patch("ecs_pilot.ui.console")
@patch("ecs_pilot.ui.print_error")
def test_show_error_prints_user_and_detail_messages(mock_print_error, mock_console, navigator):
    navigator.show_error(ProviderError("list tasks failed: Rate exceeded", ErrorCode.AWS_THROTTLED))

    mock_print_error.assert_called_once_with("🐢 AWS is throttling requests. Wait a moment and try again.")
    mock_console.print.assert_called_once_with("   list tasks failed: Rate exceeded", style="dim")
