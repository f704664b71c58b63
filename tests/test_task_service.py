"""Tests for task listing and lookup."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from ecs_pilot.core.errors import ErrorCode, ProviderError, ResourceNotFound, ValidationFailure
from ecs_pilot.features.task.task import TaskService, sort_tasks_newest_first
from factories import make_task, task_arn, task_definition_arn


def _raw_task(task_id: str, created_at: datetime | None = None, revision: int = 3) -> dict:
    raw = {
        "taskArn": task_arn("production", task_id),
        "taskDefinitionArn": task_definition_arn("web-app", revision),
        "lastStatus": "RUNNING",
        "desiredStatus": "RUNNING",
        "launchType": "FARGATE",
        "enableExecuteCommand": True,
        "containers": [
            {"name": "web", "lastStatus": "RUNNING", "cpu": "256", "memory": "512"},
            {"name": "sidecar", "lastStatus": "RUNNING", "memoryReservation": "64"},
        ],
    }
    if created_at:
        raw["createdAt"] = created_at
    return raw


def _client_with_tasks(mock_paginated_client, raw_tasks: list[dict]) -> Mock:
    client = mock_paginated_client([{"taskArns": [t["taskArn"] for t in raw_tasks]}])
    client.describe_tasks.return_value = {"tasks": raw_tasks}
    return client


def test_list_tasks_maps_records(mock_paginated_client):
    client = _client_with_tasks(mock_paginated_client, [_raw_task("task-1", datetime(2024, 1, 1, tzinfo=timezone.utc))])

    tasks = TaskService(client).list_tasks("production")

    assert len(tasks) == 1
    task = tasks[0]
    assert task.task_id == "task-1"
    assert task.definition_family == "web-app"
    assert task.definition_revision == 3
    assert task.launch_type == "FARGATE"
    assert task.enable_execute_command is True
    assert [c.name for c in task.containers] == ["web", "sidecar"]
    assert task.containers[1].memory == "64"


def test_list_tasks_filters_by_status_and_service(mock_paginated_client):
    client = _client_with_tasks(mock_paginated_client, [_raw_task("task-1")])

    TaskService(client).list_tasks("production", status="STOPPED", service_name="web-api")

    client.get_paginator.assert_called_once_with("list_tasks")
    client.get_paginator.return_value.paginate.assert_called_once_with(
        cluster="production", desiredStatus="STOPPED", serviceName="web-api"
    )


def test_list_tasks_defaults_to_running(mock_paginated_client):
    client = _client_with_tasks(mock_paginated_client, [_raw_task("task-1")])

    TaskService(client).list_tasks("production")

    client.get_paginator.return_value.paginate.assert_called_once_with(cluster="production", desiredStatus="RUNNING")


def test_list_tasks_empty_cluster_skips_describe(mock_paginated_client):
    client = mock_paginated_client([{"taskArns": []}])

    assert TaskService(client).list_tasks("production") == []
    client.describe_tasks.assert_not_called()


def test_list_tasks_sorted_newest_first_with_missing_dates_last(mock_paginated_client):
    raw_tasks = [
        _raw_task("no-date-a"),
        _raw_task("old", datetime(2024, 1, 1, tzinfo=timezone.utc)),
        _raw_task("no-date-b"),
        _raw_task("new", datetime(2024, 3, 1, tzinfo=timezone.utc)),
    ]
    client = _client_with_tasks(mock_paginated_client, raw_tasks)

    tasks = TaskService(client).list_tasks("production")

    assert [t.task_id for t in tasks] == ["new", "old", "no-date-a", "no-date-b"]


def test_sort_keeps_relative_order_of_undated_tasks():
    undated = [make_task(task_id=f"t{i}", created_at=None) for i in range(4)]

    assert sort_tasks_newest_first(undated) == undated


def test_list_tasks_describes_in_batches_of_100(mock_paginated_client):
    arns = [task_arn("production", f"task-{i}") for i in range(150)]
    client = mock_paginated_client([{"taskArns": arns}])
    client.describe_tasks.return_value = {"tasks": []}

    TaskService(client).list_tasks("production")

    assert client.describe_tasks.call_count == 2
    assert len(client.describe_tasks.call_args_list[0].kwargs["tasks"]) == 100
    assert len(client.describe_tasks.call_args_list[1].kwargs["tasks"]) == 50


def test_list_tasks_rejects_unparsable_revision(mock_paginated_client):
    raw = _raw_task("task-1")
    raw["taskDefinitionArn"] = "arn:aws:ecs:us-east-1:123456789012:task-definition/web-app:latest"
    client = _client_with_tasks(mock_paginated_client, [raw])

    with pytest.raises(ValidationFailure):
        TaskService(client).list_tasks("production")


def test_list_tasks_wraps_cluster_not_found(mock_paginated_client):
    client = mock_paginated_client([])
    client.get_paginator.return_value.paginate.side_effect = ClientError(
        {"Error": {"Code": "ClusterNotFoundException", "Message": "Cluster not found."}}, "ListTasks"
    )

    with pytest.raises(ResourceNotFound) as exc_info:
        TaskService(client).list_tasks("missing")

    assert exc_info.value.code is ErrorCode.CLUSTER_NOT_FOUND


def test_get_task_details(mock_ecs_client):
    mock_ecs_client.describe_tasks.return_value = {"tasks": [_raw_task("task-1")]}

    task = TaskService(mock_ecs_client).get_task_details("production", task_arn("production", "task-1"))

    assert task.task_id == "task-1"
    mock_ecs_client.describe_tasks.assert_called_once_with(
        cluster="production", tasks=[task_arn("production", "task-1")]
    )


def test_get_task_details_not_found(mock_ecs_client):
    mock_ecs_client.describe_tasks.return_value = {"tasks": [], "failures": [{"reason": "MISSING"}]}

    with pytest.raises(ResourceNotFound) as exc_info:
        TaskService(mock_ecs_client).get_task_details("production", task_arn("production", "gone"))

    assert exc_info.value.code is ErrorCode.TASK_NOT_FOUND


def test_get_task_details_wraps_provider_errors(mock_ecs_client):
    mock_ecs_client.describe_tasks.side_effect = ClientError(
        {"Error": {"Code": "ThrottlingException", "Message": "Rate exceeded"}}, "DescribeTasks"
    )

    with pytest.raises(ProviderError) as exc_info:
        TaskService(mock_ecs_client).get_task_details("production", task_arn("production", "task-1"))

    assert exc_info.value.code is ErrorCode.AWS_THROTTLED
    assert exc_info.value.provider_code == "ThrottlingException"
