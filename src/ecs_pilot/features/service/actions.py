"""Service actions for ECS (rollbacks)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...core.base import BaseAWSService
from ...core.errors import translate_aws_errors
from ...core.types import Deployment

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient
    from mypy_boto3_ecs.type_defs import DeploymentTypeDef

logger = logging.getLogger(__name__)


class ServiceActions(BaseAWSService):
    """Service actions for ECS services."""

    def __init__(self, ecs_client: ECSClient) -> None:
        super().__init__(ecs_client)

    def rollback_service(self, cluster_name: str, service_name: str, task_definition_arn: str) -> Deployment:
        """Point the service at another task definition with a single UpdateService call.

        Does not wait for the deployment to settle.
        """
        logger.info("Updating service %s/%s to %s", cluster_name, service_name, task_definition_arn)
        with translate_aws_errors(f"Update service '{service_name}'"):
            response = self.ecs_client.update_service(
                cluster=cluster_name, service=service_name, taskDefinition=task_definition_arn
            )

        deployments = response.get("service", {}).get("deployments", [])
        deployment = _find_new_deployment(deployments, task_definition_arn)

        return Deployment(
            service_name=service_name,
            task_definition_arn=task_definition_arn,
            deployment_id=deployment.get("id") if deployment else None,
            status=deployment.get("status") if deployment else None,
            rollout_state=deployment.get("rolloutState") if deployment else None,
        )


def _find_new_deployment(deployments: list[DeploymentTypeDef], task_definition_arn: str) -> DeploymentTypeDef | None:
    for deployment in deployments:
        if deployment.get("status") == "PRIMARY" and deployment.get("taskDefinition") == task_definition_arn:
            return deployment
    return deployments[0] if deployments else None
