"""Data models for container operations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExecTarget:
    """Where an exec session should land."""

    cluster_name: str
    task_arn: str
    container_name: str

    @property
    def task_id(self) -> str:
        return self.task_arn.split("/")[-1]
