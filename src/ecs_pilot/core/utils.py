"""Utility functions for ecs-pilot."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Literal

from rich.console import Console
from rich.spinner import Spinner

from .errors import ValidationFailure

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient

console = Console()


def extract_name_from_arn(arn: str) -> str:
    """Extract resource name from AWS ARN."""
    return arn.split("/")[-1]


def parse_task_definition_arn(arn: str) -> tuple[str, int]:
    """Split a task definition ARN (or family:revision) into family and revision.

    Raises ValidationFailure when the revision suffix is not a positive integer.
    """
    family, _, revision = extract_name_from_arn(arn).rpartition(":")
    if not family:
        raise ValidationFailure(f"Task definition '{arn}' has no revision", field="taskDefinitionArn", value=arn)
    try:
        revision_number = int(revision)
    except ValueError:
        raise ValidationFailure(
            f"Task definition '{arn}' has a non-numeric revision", field="taskDefinitionArn", value=arn
        ) from None
    if revision_number <= 0:
        raise ValidationFailure(
            f"Task definition '{arn}' has a non-positive revision", field="taskDefinitionArn", value=arn
        )
    return family, revision_number


def format_time_ago(moment: datetime | None, now: datetime | None = None) -> str:
    """Human relative time, e.g. '5m ago'. Dates older than a year are shown as YYYY-MM-DD."""
    if moment is None:
        return "unknown"

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    seconds = int((now - moment).total_seconds())
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    if days < 30:
        return f"{days // 7}w ago"
    if days < 365:
        return f"{days // 30}mo ago"
    return moment.strftime("%Y-%m-%d")


def determine_service_status(running_count: int, desired_count: int, pending_count: int) -> tuple[str, str]:
    """Determine service status icon and text."""
    if running_count == desired_count and pending_count == 0:
        return "✅", "HEALTHY"
    if running_count < desired_count:
        return "⚠️", "SCALING"
    if running_count > desired_count:
        return "🔴", "OVER_SCALED"
    return "🟡", "PENDING"


def print_error(message: str) -> None:
    console.print(f"❌ {message}", style="red")


def print_success(message: str) -> None:
    console.print(f"✅ {message}", style="green")


def print_warning(message: str) -> None:
    console.print(f"⚠️ {message}", style="yellow")


def print_info(message: str) -> None:
    console.print(message, style="blue")


@contextmanager
def show_spinner(message: str = "Loading...") -> Iterator[None]:
    """Context manager that shows a spinner while running operations."""
    spinner = Spinner("dots", text=message, style="cyan")
    with console.status(spinner):
        yield


def chunked(items: list[str], size: int) -> Iterator[list[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def paginate_aws_list(
    client: ECSClient,
    operation_name: Literal[
        "list_clusters",
        "list_container_instances",
        "list_services",
        "list_task_definitions",
        "list_tasks",
    ],
    result_key: str,
    **kwargs: str,
) -> list[str]:
    paginator = client.get_paginator(operation_name)  # type: ignore[no-matching-overload]
    page_iterator = paginator.paginate(**kwargs)

    results: list[str] = []
    for page in page_iterator:
        results.extend(page.get(result_key, []))

    return results
