"""Environment diagnostics."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from ...core.base import BaseAWSService
from ...core.config import config_problems, get_config_path
from ...core.errors import EcsPilotError, translate_aws_errors

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient
    from mypy_boto3_sts.client import STSClient

logger = logging.getLogger(__name__)


class CheckStatus(Enum):
    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"


@dataclass(frozen=True)
class CheckResult:
    name: str
    status: CheckStatus
    message: str


class DoctorService(BaseAWSService):
    """Runs the environment checks an exec session or rollback depends on."""

    def __init__(
        self,
        ecs_client: ECSClient,
        sts_client: STSClient,
        config_path: Path | None = None,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        super().__init__(ecs_client)
        self.sts_client = sts_client
        self.config_path = config_path
        self._which = which

    def run_checks(self) -> list[CheckResult]:
        return [
            self.check_aws_cli(),
            self.check_session_manager_plugin(),
            self.check_credentials(),
            self.check_ecs_access(),
            self.check_config_file(),
        ]

    def check_aws_cli(self) -> CheckResult:
        path = self._which("aws")
        if not path:
            return CheckResult("AWS CLI", CheckStatus.FAILED, "'aws' not found on PATH; exec sessions need it")

        try:
            result = subprocess.run([path, "--version"], capture_output=True, text=True, timeout=10, check=False)
        except (OSError, subprocess.TimeoutExpired) as e:
            return CheckResult("AWS CLI", CheckStatus.WARNING, f"Found at {path} but could not run it: {e}")

        version = (result.stdout or result.stderr).strip().split(" ")[0]
        return CheckResult("AWS CLI", CheckStatus.PASSED, version or path)

    def check_session_manager_plugin(self) -> CheckResult:
        path = self._which("session-manager-plugin")
        if not path:
            return CheckResult(
                "Session Manager plugin", CheckStatus.FAILED, "'session-manager-plugin' not found on PATH"
            )
        return CheckResult("Session Manager plugin", CheckStatus.PASSED, path)

    def check_credentials(self) -> CheckResult:
        try:
            with translate_aws_errors("Get caller identity"):
                identity = self.sts_client.get_caller_identity()
        except EcsPilotError as e:
            return CheckResult("AWS credentials", CheckStatus.FAILED, e.user_message)
        return CheckResult("AWS credentials", CheckStatus.PASSED, f"{identity['Arn']} ({identity['Account']})")

    def check_ecs_access(self) -> CheckResult:
        try:
            with translate_aws_errors("List clusters"):
                response = self.ecs_client.list_clusters(maxResults=1)
        except EcsPilotError as e:
            return CheckResult("ECS API access", CheckStatus.FAILED, e.user_message)

        region = self.ecs_client.meta.region_name
        if not response.get("clusterArns"):
            return CheckResult("ECS API access", CheckStatus.WARNING, f"Reachable in {region}, but no clusters found")
        return CheckResult("ECS API access", CheckStatus.PASSED, f"Reachable in {region}")

    def check_config_file(self) -> CheckResult:
        path = get_config_path(self.config_path)
        if not path.exists():
            return CheckResult("Configuration", CheckStatus.PASSED, f"No file at {path}, using defaults")
        problems = config_problems(path)
        if problems:
            return CheckResult("Configuration", CheckStatus.WARNING, f"{path}: {'; '.join(problems)} (defaults used)")
        return CheckResult("Configuration", CheckStatus.PASSED, str(path))
