"""Base classes for AWS services and UI components."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.console import Console

from .navigation import NavResult, select_with_auto_pagination

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient

# Shared by every concurrent fan-out; matches the client's connection pool size
MAX_CONCURRENT_REQUESTS = 5


class BaseAWSService:
    """Base class for AWS service interactions with common patterns."""

    def __init__(self, ecs_client: ECSClient) -> None:
        self.ecs_client = ecs_client


class BaseUIComponent:
    """Base class for UI components with common patterns."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def select_with_nav(self, prompt: str, choices: list[dict[str, Any]], back_text: str | None) -> NavResult[Any]:
        """Standard selection with back/exit navigation."""
        return select_with_auto_pagination(prompt, choices, back_text)
