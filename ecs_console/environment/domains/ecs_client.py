"""ECS client wrapper: service discovery and task definition lookup."""
import logging
from typing import Any, Dict, List, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import DefinitionNotFound, DirectoryUnavailable, MalformedResponse, ServiceNotFound
from .models import PlainEnvEntry, SecretRef

logger = logging.getLogger(__name__)

# Error codes DescribeTaskDefinition returns for an unknown or deregistered revision
DEFINITION_MISSING_CODES = {"ClientException", "InvalidParameterException"}


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "ClientError")


def _require_str(record: Dict[str, Any], key: str, context: str) -> str:
    value = record.get(key) if isinstance(record, dict) else None
    if not isinstance(value, str):
        raise MalformedResponse(f"{context}: missing or non-string '{key}'")
    return value


def service_name_from_arn(service_arn: str) -> str:
    """
    Short service name from a service ARN.

    Handles both the long ARN format (service/<cluster>/<name>) and the
    legacy one (service/<name>).
    """
    return service_arn.rsplit("/", 1)[-1]


class EcsServiceDirectory:
    """Wrapper around the boto3 ECS client."""

    def __init__(self, session: Optional[boto3.session.Session] = None, client=None):
        self._session = session
        self._client = client

    @property
    def client(self):
        """Lazy-initialize client."""
        if self._client is None:
            session = self._session or boto3.session.Session()
            self._client = session.client("ecs")
        return self._client

    def list_services(self, cluster: str) -> List[str]:
        """
        List the services of a cluster.

        Args:
            cluster: ECS cluster name

        Returns:
            Service names in the order ECS returns them; empty if the
            cluster has none

        Raises:
            DirectoryUnavailable: If the ECS query fails
        """
        services: List[str] = []
        try:
            paginator = self.client.get_paginator("list_services")
            for page in paginator.paginate(cluster=cluster):
                for arn in page.get("serviceArns", []):
                    services.append(service_name_from_arn(arn))
        except ClientError as e:
            raise DirectoryUnavailable(
                f"Failed to list services in cluster {cluster} ({_error_code(e)}): {e}"
            ) from e
        except BotoCoreError as e:
            raise DirectoryUnavailable(f"Failed to list services in cluster {cluster}: {e}") from e

        logger.info(f"Found {len(services)} services in cluster {cluster}")
        return services

    def current_definition_of(self, cluster: str, service: str) -> str:
        """
        Task definition ARN currently deployed for a service.

        Raises:
            ServiceNotFound: If the service does not exist (or is inactive)
            DirectoryUnavailable: If the ECS query fails
            MalformedResponse: If the service carries no task definition
        """
        try:
            response = self.client.describe_services(cluster=cluster, services=[service])
        except ClientError as e:
            if _error_code(e) == "ServiceNotFoundException":
                raise ServiceNotFound(service, cluster) from e
            raise DirectoryUnavailable(
                f"Failed to describe service {service} ({_error_code(e)}): {e}"
            ) from e
        except BotoCoreError as e:
            raise DirectoryUnavailable(f"Failed to describe service {service}: {e}") from e

        for failure in response.get("failures", []):
            logger.debug(f"describe_services failure: {failure.get('arn')} {failure.get('reason')}")

        active = [s for s in response.get("services", []) if s.get("status") != "INACTIVE"]
        if not active:
            raise ServiceNotFound(service, cluster)

        definition = _require_str(active[0], "taskDefinition", f"Service {service}")
        logger.info(f"Service {service} runs task definition {definition}")
        return definition

    def resolve_definition(self, reference: str) -> Tuple[List[PlainEnvEntry], List[SecretRef]]:
        """
        Plain environment entries and secret references of a task definition.

        Only the first container definition is read; additional containers
        (sidecars) are ignored, never merged.

        Args:
            reference: Task definition ARN or family:revision

        Returns:
            (plain entries, secret references), each in declaration order

        Raises:
            DefinitionNotFound: If the definition no longer resolves
            DirectoryUnavailable: If the ECS query fails
            MalformedResponse: If the definition has no containers or bad entries
        """
        try:
            response = self.client.describe_task_definition(taskDefinition=reference)
        except ClientError as e:
            if _error_code(e) in DEFINITION_MISSING_CODES:
                raise DefinitionNotFound(reference) from e
            raise DirectoryUnavailable(
                f"Failed to describe task definition {reference} ({_error_code(e)}): {e}"
            ) from e
        except BotoCoreError as e:
            raise DirectoryUnavailable(f"Failed to describe task definition {reference}: {e}") from e

        containers = (response.get("taskDefinition") or {}).get("containerDefinitions") or []
        if not containers:
            raise MalformedResponse(f"Task definition {reference} has no container definitions")
        if len(containers) > 1:
            ignored = ", ".join(str(c.get("name")) for c in containers[1:])
            logger.debug(f"Using first container only, ignoring: {ignored}")

        container = containers[0]
        context = f"Task definition {reference}"

        plain = [
            PlainEnvEntry(
                name=_require_str(entry, "name", f"{context} environment entry"),
                value=_require_str(entry, "value", f"{context} environment entry"),
            )
            for entry in container.get("environment") or []
        ]
        secrets = [
            SecretRef(
                name=_require_str(entry, "name", f"{context} secret entry"),
                source_locator=_require_str(entry, "valueFrom", f"{context} secret entry"),
            )
            for entry in container.get("secrets") or []
        ]

        logger.info(f"{context}: {len(plain)} environment entries, {len(secrets)} secrets")
        return plain, secrets
