"""Cluster operations for ECS."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import TYPE_CHECKING

from botocore.exceptions import BotoCoreError, ClientError

from ...core.base import MAX_CONCURRENT_REQUESTS, BaseAWSService
from ...core.errors import translate_aws_errors
from ...core.types import Cluster
from ...core.utils import chunked, paginate_aws_list

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient
    from mypy_boto3_ecs.type_defs import ClusterTypeDef

logger = logging.getLogger(__name__)

DESCRIBE_CLUSTERS_BATCH = 100


class ClusterService(BaseAWSService):
    """Service for ECS cluster operations."""

    def __init__(self, ecs_client: ECSClient) -> None:
        super().__init__(ecs_client)

    def list_clusters(self) -> list[Cluster]:
        """All clusters with statistics and resource counts, most active first."""
        with translate_aws_errors("List clusters"):
            cluster_arns = paginate_aws_list(self.ecs_client, "list_clusters", "clusterArns")
            if not cluster_arns:
                logger.warning("No ECS clusters found")
                return []

            described: list[ClusterTypeDef] = []
            for batch in chunked(cluster_arns, DESCRIBE_CLUSTERS_BATCH):
                response = self.ecs_client.describe_clusters(clusters=batch, include=["STATISTICS"])
                described.extend(response.get("clusters", []))

        clusters = [_create_cluster(cluster) for cluster in described]
        with ThreadPoolExecutor(max_workers=MAX_CONCURRENT_REQUESTS) as executor:
            enriched = list(executor.map(self._with_resource_counts, clusters))

        return sort_clusters_by_activity(enriched)

    def _with_resource_counts(self, cluster: Cluster) -> Cluster:
        return replace(
            cluster,
            service_count=len(self._list_or_empty("list_services", "serviceArns", cluster.name)),
            task_count=len(self._list_or_empty("list_tasks", "taskArns", cluster.name)),
            container_instance_count=len(
                self._list_or_empty("list_container_instances", "containerInstanceArns", cluster.name)
            ),
        )

    def _list_or_empty(self, operation_name: str, result_key: str, cluster_name: str) -> list[str]:
        try:
            return paginate_aws_list(self.ecs_client, operation_name, result_key, cluster=cluster_name)  # type: ignore[arg-type]
        except (ClientError, BotoCoreError) as e:
            logger.debug("%s failed for cluster %s: %s", operation_name, cluster_name, e)
            return []


def _create_cluster(cluster: ClusterTypeDef) -> Cluster:
    return Cluster(
        name=cluster["clusterName"],
        arn=cluster["clusterArn"],
        status=cluster.get("status", "UNKNOWN"),
        running_tasks_count=cluster.get("runningTasksCount", 0),
        pending_tasks_count=cluster.get("pendingTasksCount", 0),
        active_services_count=cluster.get("activeServicesCount", 0),
    )


def sort_clusters_by_activity(clusters: list[Cluster]) -> list[Cluster]:
    """ACTIVE first, then by running tasks, then by active services, then by name."""
    return sorted(
        clusters,
        key=lambda c: (not c.is_active, -c.running_tasks_count, -c.active_services_count, c.name),
    )
