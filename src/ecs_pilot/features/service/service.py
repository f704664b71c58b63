"""Service operations for ECS."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...core.base import BaseAWSService
from ...core.errors import translate_aws_errors
from ...core.types import Service
from ...core.utils import (
    chunked,
    determine_service_status,
    extract_name_from_arn,
    paginate_aws_list,
    parse_task_definition_arn,
)

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient
    from mypy_boto3_ecs.type_defs import ServiceTypeDef

logger = logging.getLogger(__name__)

DESCRIBE_SERVICES_BATCH = 10


class ServiceService(BaseAWSService):
    """Service for ECS service operations."""

    def __init__(self, ecs_client: ECSClient) -> None:
        super().__init__(ecs_client)

    def get_service_names(self, cluster_name: str) -> list[str]:
        service_arns = paginate_aws_list(self.ecs_client, "list_services", "serviceArns", cluster=cluster_name)
        return [extract_name_from_arn(arn) for arn in service_arns]

    def list_services(self, cluster_name: str) -> list[Service]:
        """All services in the cluster, sorted by name."""
        with translate_aws_errors(f"List services in cluster '{cluster_name}'"):
            service_names = self.get_service_names(cluster_name)
            if not service_names:
                return []

            raw_services: list[ServiceTypeDef] = []
            for batch in chunked(service_names, DESCRIBE_SERVICES_BATCH):
                response = self.ecs_client.describe_services(cluster=cluster_name, services=batch)
                raw_services.extend(response.get("services", []))

        services = []
        for raw_service in raw_services:
            # Services on the EXTERNAL deployment controller run task sets and have no task definition
            if not raw_service.get("taskDefinition"):
                logger.debug("Skipping service %s without a task definition", raw_service.get("serviceName"))
                continue
            services.append(_create_service(raw_service))
        return sorted(services, key=lambda service: service.service_name)


def get_service_health(service: Service) -> tuple[str, str]:
    return determine_service_status(service.running_count, service.desired_count, service.pending_count)


def _create_service(service: ServiceTypeDef) -> Service:
    task_definition_arn = service["taskDefinition"]
    family, revision = parse_task_definition_arn(task_definition_arn)

    return Service(
        service_name=service["serviceName"],
        service_arn=service["serviceArn"],
        task_definition_arn=task_definition_arn,
        family=family,
        revision=revision,
        status=service.get("status", "UNKNOWN"),
        desired_count=service.get("desiredCount", 0),
        running_count=service.get("runningCount", 0),
        pending_count=service.get("pendingCount", 0),
    )
