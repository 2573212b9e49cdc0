"""Errors raised while resolving and launching a service environment."""
from typing import Iterable


class EcsConsoleError(Exception):
    """Base class for ecs-console runtime errors."""


class DirectoryUnavailable(EcsConsoleError):
    """ECS could not be queried (transport, auth or API failure)."""


class SecretStoreUnavailable(EcsConsoleError):
    """SSM Parameter Store could not be queried (transport, auth or API failure)."""


class ServiceNotFound(EcsConsoleError):
    """The service does not exist in the cluster."""

    def __init__(self, service: str, cluster: str):
        self.service = service
        self.cluster = cluster
        super().__init__(f"Service {service} not found in cluster {cluster}")


class DefinitionNotFound(EcsConsoleError):
    """The task definition no longer resolves (e.g. deregistered after discovery)."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Task definition {reference} not found")


class EmptyDirectory(EcsConsoleError):
    """The cluster has no services to choose from."""

    def __init__(self, cluster: str):
        self.cluster = cluster
        super().__init__(f"No services found in cluster {cluster}")


class MalformedResponse(EcsConsoleError):
    """An API response is missing a required field or has the wrong shape."""


class UnresolvedSecrets(EcsConsoleError):
    """Secret references did not resolve and strict mode is enabled."""

    def __init__(self, names: Iterable[str]):
        self.names = list(names)
        super().__init__(
            "Secrets could not be resolved from the parameter store: "
            + ", ".join(self.names)
        )


class LaunchFailed(EcsConsoleError):
    """The command could not be started."""


class Aborted(EcsConsoleError):
    """The operator interrupted the run."""

    def __init__(self, message: str = "Aborted"):
        super().__init__(message)
