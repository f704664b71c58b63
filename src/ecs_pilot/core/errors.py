"""Error taxonomy for ecs-pilot and translation of AWS SDK failures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
    ProfileNotFound,
    ReadTimeoutError,
)

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    AWS_CREDENTIALS_MISSING = "AWS_CREDENTIALS_MISSING"
    AWS_PROFILE_INVALID = "AWS_PROFILE_INVALID"
    AWS_REGION_INVALID = "AWS_REGION_INVALID"
    AWS_API_ERROR = "AWS_API_ERROR"
    AWS_THROTTLED = "AWS_THROTTLED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    CLUSTER_NOT_FOUND = "CLUSTER_NOT_FOUND"
    SERVICE_NOT_FOUND = "SERVICE_NOT_FOUND"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    CONTAINER_NOT_FOUND = "CONTAINER_NOT_FOUND"
    TASK_DEFINITION_NOT_FOUND = "TASK_DEFINITION_NOT_FOUND"
    NO_RUNNING_TASKS = "NO_RUNNING_TASKS"
    NO_ELIGIBLE_REVISIONS = "NO_ELIGIBLE_REVISIONS"
    USER_CANCELLED = "USER_CANCELLED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    MISSING_DEPENDENCY = "MISSING_DEPENDENCY"


USER_MESSAGES = {
    ErrorCode.AWS_CREDENTIALS_MISSING: "🔐 AWS credentials not found. Please configure your AWS credentials.",
    ErrorCode.AWS_PROFILE_INVALID: "👤 Invalid AWS profile. Please check your AWS profile configuration.",
    ErrorCode.AWS_REGION_INVALID: "🌍 Invalid AWS region. Please specify a valid AWS region.",
    ErrorCode.AWS_API_ERROR: "☁️ AWS API error occurred. Please check your permissions and try again.",
    ErrorCode.AWS_THROTTLED: "🐢 AWS is throttling requests. Wait a moment and try again.",
    ErrorCode.PERMISSION_DENIED: "🔒 Permission denied. Please check your IAM permissions.",
    ErrorCode.NETWORK_ERROR: "🌐 Network error. Please check your internet connection.",
    ErrorCode.TIMEOUT: "⏰ Request timed out. Please try again.",
    ErrorCode.CLUSTER_NOT_FOUND: "🏗️ ECS cluster not found. Please verify the cluster name.",
    ErrorCode.SERVICE_NOT_FOUND: "⚙️ ECS service not found. Please verify the service name.",
    ErrorCode.TASK_NOT_FOUND: "📋 Task not found. It may have stopped.",
    ErrorCode.CONTAINER_NOT_FOUND: "📦 Container not found in the task.",
    ErrorCode.TASK_DEFINITION_NOT_FOUND: "📄 Task definition not found.",
    ErrorCode.NO_RUNNING_TASKS: "💤 No running tasks found in the cluster.",
    ErrorCode.NO_ELIGIBLE_REVISIONS: "📭 No other task definition revisions are available.",
    ErrorCode.USER_CANCELLED: "🚫 Operation cancelled by user.",
    ErrorCode.VALIDATION_FAILED: "❌ Validation failed. Please check your input.",
    ErrorCode.MISSING_DEPENDENCY: "📦 Missing required dependency. Please install the required tools.",
}

_PROVIDER_CODES = {
    "ClusterNotFoundException": ErrorCode.CLUSTER_NOT_FOUND,
    "ServiceNotFoundException": ErrorCode.SERVICE_NOT_FOUND,
    "ServiceNotActiveException": ErrorCode.SERVICE_NOT_FOUND,
    "AccessDeniedException": ErrorCode.PERMISSION_DENIED,
    "AccessDenied": ErrorCode.PERMISSION_DENIED,
    "UnauthorizedOperation": ErrorCode.PERMISSION_DENIED,
    "ThrottlingException": ErrorCode.AWS_THROTTLED,
    "Throttling": ErrorCode.AWS_THROTTLED,
    "TooManyRequestsException": ErrorCode.AWS_THROTTLED,
    "ExpiredToken": ErrorCode.AWS_CREDENTIALS_MISSING,
    "ExpiredTokenException": ErrorCode.AWS_CREDENTIALS_MISSING,
    "UnrecognizedClientException": ErrorCode.AWS_CREDENTIALS_MISSING,
    "InvalidClientTokenId": ErrorCode.AWS_CREDENTIALS_MISSING,
}

_NOT_FOUND_CODES = {
    ErrorCode.CLUSTER_NOT_FOUND,
    ErrorCode.SERVICE_NOT_FOUND,
    ErrorCode.TASK_NOT_FOUND,
    ErrorCode.CONTAINER_NOT_FOUND,
    ErrorCode.TASK_DEFINITION_NOT_FOUND,
}


class EcsPilotError(Exception):
    """Base error carrying a classification code and free-form metadata."""

    default_code = ErrorCode.AWS_API_ERROR

    def __init__(self, message: str, code: ErrorCode | None = None, **metadata: Any) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.metadata = metadata

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, self.message)


class ResourceNotFound(EcsPilotError):
    default_code = ErrorCode.TASK_NOT_FOUND


class NoRunningTasks(EcsPilotError):
    default_code = ErrorCode.NO_RUNNING_TASKS


class NoEligibleRevisions(EcsPilotError):
    default_code = ErrorCode.NO_ELIGIBLE_REVISIONS


class ProviderError(EcsPilotError):
    """A control-plane failure, keeping the provider's own error code."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        provider_code: str | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message, code, provider_code=provider_code, operation=operation)
        self.provider_code = provider_code
        self.operation = operation


class UserCancelled(EcsPilotError):
    default_code = ErrorCode.USER_CANCELLED

    def __init__(self, message: str = "Operation cancelled by user") -> None:
        super().__init__(message)


class ValidationFailure(EcsPilotError):
    default_code = ErrorCode.VALIDATION_FAILED


class MissingDependency(EcsPilotError):
    default_code = ErrorCode.MISSING_DEPENDENCY


def from_aws_error(error: Exception, operation: str) -> EcsPilotError:
    """Classify a botocore failure into the ecs-pilot error taxonomy."""
    if isinstance(error, ClientError):
        provider_code = error.response.get("Error", {}).get("Code", "Unknown")
        provider_message = error.response.get("Error", {}).get("Message", str(error))
        code = _PROVIDER_CODES.get(provider_code, ErrorCode.AWS_API_ERROR)
        message = f"{operation} failed: {provider_message}"
        if code in _NOT_FOUND_CODES:
            return ResourceNotFound(message, code, provider_code=provider_code, operation=operation)
        return ProviderError(message, code, provider_code=provider_code, operation=operation)

    provider_code = type(error).__name__
    if isinstance(error, (NoCredentialsError, PartialCredentialsError)):
        code = ErrorCode.AWS_CREDENTIALS_MISSING
    elif isinstance(error, ProfileNotFound):
        code = ErrorCode.AWS_PROFILE_INVALID
    elif isinstance(error, NoRegionError):
        code = ErrorCode.AWS_REGION_INVALID
    elif isinstance(error, (ConnectTimeoutError, ReadTimeoutError)):
        code = ErrorCode.TIMEOUT
    elif isinstance(error, EndpointConnectionError):
        code = ErrorCode.NETWORK_ERROR
    else:
        code = ErrorCode.AWS_API_ERROR
    return ProviderError(f"{operation} failed: {error}", code, provider_code=provider_code, operation=operation)


@contextmanager
def translate_aws_errors(operation: str) -> Iterator[None]:
    """Re-raise botocore failures inside the block as ecs-pilot errors."""
    try:
        yield
    except (ClientError, BotoCoreError) as e:
        logger.debug("AWS call '%s' failed: %s", operation, e)
        raise from_aws_error(e, operation) from e
