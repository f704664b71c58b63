import argparse
import logging
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from mypy_boto3_ecs import ECSClient
    from mypy_boto3_sts.client import STSClient

from .aws_service import ECSService
from .core.app import run_exec_flow, run_rollback_flow, say_goodbye
from .core.config import (
    DEFAULT_REGION,
    KNOWN_REGIONS,
    PERSISTED_KEYS,
    Settings,
    get_config_path,
    load_settings,
    reset_settings,
    update_setting,
)
from .core.errors import EcsPilotError, UserCancelled, from_aws_error
from .core.log import configure_logging
from .features.container.container import ExecSessionLauncher
from .features.doctor.doctor import CheckStatus, DoctorService
from .features.doctor.ui import DoctorUI
from .ui import ECSNavigator

try:
    __version__ = version("ecs-pilot")
except PackageNotFoundError:
    __version__ = "dev"

console = Console()
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecs-pilot", description="Exec into ECS containers and roll services back, interactively"
    )
    parser.add_argument("--version", action="version", version=f"ecs-pilot {__version__}")
    parser.add_argument("--profile", help="AWS profile to use for authentication", type=str, default=None)
    parser.add_argument("--region", help="AWS region to use", type=str, default=None)
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    subparsers = parser.add_subparsers(dest="command")

    execute = subparsers.add_parser("execute", aliases=["exec"], help="Open a shell in a running container (default)")
    execute.add_argument("--cluster", help="Skip cluster selection and use this cluster", default=None)
    execute.add_argument("--command", dest="exec_command", help="Command to run in the container", default=None)

    rollback = subparsers.add_parser("rollback", help="Roll a service back to an earlier task definition revision")
    rollback.add_argument("--cluster", help="Skip cluster selection and use this cluster", default=None)

    config = subparsers.add_parser("config", help="Show or change saved settings")
    config_actions = config.add_subparsers(dest="config_action")
    config_actions.add_parser("show", help="Show current settings (default)")
    config_set = config_actions.add_parser("set", help="Save a setting; an empty value clears it")
    config_set.add_argument("key", choices=PERSISTED_KEYS)
    config_set.add_argument("value", nargs="?", default=None)
    config_actions.add_parser("reset", help="Restore default settings")

    subparsers.add_parser("doctor", help="Check the local environment and AWS access")

    return parser


def main() -> int:
    """Interactive AWS ECS exec and rollback tool."""
    args = build_parser().parse_args()
    command = args.command or "execute"

    configure_logging(args.verbose, args.quiet)

    try:
        settings = load_settings(profile=args.profile, region=args.region, verbose=args.verbose, quiet=args.quiet)

        if command == "config":
            return run_config_command(args)

        if not settings.quiet:
            console.print("🚀 Welcome to ecs-pilot!", style="bold cyan")
            console.print("Interactive AWS ECS exec and rollback\n", style="dim")

        if command == "doctor":
            return run_doctor_command(settings)

        ecs_client = _create_aws_client(settings.profile, settings.region)
        ecs_service = ECSService(ecs_client)
        navigator = ECSNavigator(ecs_service)
        cluster = getattr(args, "cluster", None) or settings.default_cluster

        if command == "rollback":
            return run_rollback_flow(navigator, cluster)

        launcher = ExecSessionLauncher(
            profile=settings.profile,
            region=settings.region or ecs_service.get_region(),
            command=getattr(args, "exec_command", None) or settings.exec_command,
        )
        return run_exec_flow(navigator, launcher, cluster)

    except (UserCancelled, KeyboardInterrupt):
        say_goodbye()
        return 0
    except EcsPilotError as e:
        console.print(f"\n❌ {e.user_message}", style="red")
        console.print(e.message, style="dim")
        return 1
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        console.print(f"\n❌ Error: {e}", style="red")
        console.print("Make sure your AWS credentials are configured.", style="dim")
        return 1


def run_config_command(args: argparse.Namespace) -> int:
    action = args.config_action or "show"
    if action == "set":
        settings = update_setting(args.key, args.value)
        console.print(f"✅ Saved {args.key} = {getattr(settings, args.key)}", style="green")
    elif action == "reset":
        settings = reset_settings()
        console.print("✅ Settings reset to defaults", style="green")
    else:
        settings = load_settings()

    display_settings(settings)
    return 0


def display_settings(settings: Settings) -> None:
    table = Table(title=f"Settings ({get_config_path()})", show_header=True, header_style="bold magenta")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    for key, value in settings.persisted().items():
        table.add_row(key, "" if value is None else str(value))
    console.print(table)
    console.print(f"Common regions: {', '.join(KNOWN_REGIONS)}", style="dim")


def run_doctor_command(settings: Settings) -> int:
    ecs_client = _create_aws_client(settings.profile, settings.region)
    sts_client = _create_sts_client(settings.profile, settings.region)
    results = DoctorUI(DoctorService(ecs_client, sts_client)).run()
    return 1 if any(result.status is CheckStatus.FAILED for result in results) else 0


def _create_session(profile_name: str | None, region_name: str | None) -> boto3.Session:
    try:
        session = boto3.Session(profile_name=profile_name, region_name=region_name)
    except BotoCoreError as e:
        raise from_aws_error(e, "Create AWS session") from e

    if not session.region_name:
        logger.debug("No region configured, falling back to %s", DEFAULT_REGION)
        session = boto3.Session(profile_name=profile_name, region_name=DEFAULT_REGION)
    return session


def _client_config() -> Config:
    return Config(
        max_pool_connections=5,
        retries={"max_attempts": 2, "mode": "adaptive"},
    )


def _create_aws_client(profile_name: str | None, region_name: str | None = None) -> "ECSClient":
    """Create optimized AWS ECS client with connection pooling."""
    session = _create_session(profile_name, region_name)
    try:
        return session.client("ecs", config=_client_config())
    except BotoCoreError as e:
        raise from_aws_error(e, "Create ECS client") from e


def _create_sts_client(profile_name: str | None, region_name: str | None = None) -> "STSClient":
    """Create STS client used to verify credentials."""
    session = _create_session(profile_name, region_name)
    try:
        return session.client("sts", config=_client_config())
    except BotoCoreError as e:
        raise from_aws_error(e, "Create STS client") from e


if __name__ == "__main__":
    raise SystemExit(main())
