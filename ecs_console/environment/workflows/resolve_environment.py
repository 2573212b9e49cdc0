"""Workflow resolving the environment of an ECS service."""
import logging
from typing import Callable, List, Optional, Sequence

from ..domains.ecs_client import EcsServiceDirectory
from ..domains.errors import EmptyDirectory, UnresolvedSecrets
from ..domains.merger import merge
from ..domains.models import EnvironmentTable, ResolvedSecret, SecretRef
from ..domains.ssm_client import SsmSecretResolver

logger = logging.getLogger(__name__)


def unresolved_refs(refs: Sequence[SecretRef], resolved: Sequence[ResolvedSecret]) -> List[SecretRef]:
    """Secret references whose locator the parameter store did not return."""
    found = {r.source_locator for r in resolved}
    return [ref for ref in refs if ref.source_locator not in found]


def resolve_environment(
    cluster: str,
    service: Optional[str] = None,
    *,
    directory: EcsServiceDirectory,
    secrets: SsmSecretResolver,
    select: Callable[[List[str]], str],
    strict_secrets: bool = False,
) -> EnvironmentTable:
    """
    Resolve the merged environment of a service.

    Args:
        cluster: ECS cluster name
        service: Service name; when None, `select` picks one from the cluster
        directory: ECS service directory
        secrets: Parameter store resolver
        select: Chooses a service from a non-empty list of names
        strict_secrets: Fail instead of warning when a secret does not resolve

    Returns:
        EnvironmentTable with plain and secret entries

    Behavior:
        - Stages run strictly in sequence; the first error stops the run
        - A secret whose parameter is missing gets no entry and a warning
          (UnresolvedSecrets in strict mode)
    """
    if service is None:
        services = directory.list_services(cluster)
        if not services:
            raise EmptyDirectory(cluster)
        service = select(services)

    definition = directory.current_definition_of(cluster, service)
    plain, refs = directory.resolve_definition(definition)
    resolved = secrets.resolve_batch(refs)
    table = merge(plain, refs, resolved)

    missing = unresolved_refs(refs, resolved)
    if missing:
        if strict_secrets:
            raise UnresolvedSecrets(ref.name for ref in missing)
        for ref in missing:
            logger.warning(f"Secret {ref.name} not resolved from {ref.source_locator}, skipping")

    logger.info(f"Resolved {len(table)} variables for {cluster}/{service}")
    return table
