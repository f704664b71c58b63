"""Interactive exec sessions through the AWS CLI."""

from __future__ import annotations

import logging
import shutil
import signal
import subprocess
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from ...core.errors import MissingDependency
from .models import ExecTarget

logger = logging.getLogger(__name__)

FORWARDED_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGTERM", "SIGQUIT") if hasattr(signal, name)
)


def build_exec_command(
    target: ExecTarget, profile: str | None = None, region: str | None = None, command: str = "/bin/sh"
) -> list[str]:
    exec_args = ["aws", "ecs", "execute-command"]
    if profile:
        exec_args += ["--profile", profile]
    if region:
        exec_args += ["--region", region]

    # fmt: off
    exec_args += [
        "--cluster", target.cluster_name,
        "--task", target.task_arn,
        "--container", target.container_name,
        "--command", command,
        "--interactive",
    ]
    # fmt: on
    return exec_args


@contextmanager
def forward_signals(process: subprocess.Popen[Any]) -> Iterator[None]:
    """Relay termination signals to the child while it runs; previous handlers are always restored."""

    def _forward(signum: int, _frame: Any) -> None:  # noqa: ANN401
        logger.debug("Forwarding signal %s to exec session", signum)
        if process.poll() is None:
            process.send_signal(signum)

    previous_handlers = {}
    try:
        for sig in FORWARDED_SIGNALS:
            previous_handlers[sig] = signal.signal(sig, _forward)
        yield
    finally:
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)


class ExecSessionLauncher:
    """Runs `aws ecs execute-command` for a container and waits for it to finish."""

    def __init__(
        self,
        profile: str | None = None,
        region: str | None = None,
        command: str = "/bin/sh",
        popen: Callable[..., subprocess.Popen[Any]] = subprocess.Popen,
    ) -> None:
        self.profile = profile
        self.region = region
        self.command = command
        self._popen = popen

    def run(self, target: ExecTarget) -> int:
        """Start the session and return the child's exit code (0 when it has none)."""
        if shutil.which("aws") is None:
            raise MissingDependency("The AWS CLI ('aws') was not found on PATH", tool="aws")

        exec_args = build_exec_command(target, self.profile, self.region, self.command)
        logger.debug("Running: %s", exec_args)

        try:
            process = self._popen(exec_args)
        except OSError as e:
            raise MissingDependency(f"Could not start the AWS CLI: {e}", tool="aws") from e

        with forward_signals(process):
            return_code = process.wait()

        # A child killed by a signal reports a negative code
        if return_code is None or return_code < 0:
            return 0
        return return_code
