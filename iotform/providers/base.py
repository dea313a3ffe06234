"""Abstract base class for resource lifecycle handlers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Optional

from ..schemas.base import ResourceConfig
from ..services.resilience import MutationRetrier

logger = logging.getLogger(__name__)


class PartialCreateError(Exception):
    """The resource was created remotely but a follow-up call failed.

    ``remote_id`` identifies the resource that now exists; ``error`` is the
    exception raised by the follow-up call.
    """

    def __init__(self, remote_id: str, error: Exception) -> None:
        super().__init__(f"{remote_id} was created but not completed: {error}")
        self.remote_id = remote_id
        self.error = error


class ResourceHandler(ABC):
    """Interface that every resource kind implements.

    A handler owns no connection of its own: the boto3 client for its
    service is injected, together with the retrier used for mutations that
    race IAM propagation. Configuration enters through :meth:`decode` once
    and flows through the lifecycle methods as a typed model.
    """

    resource_type: ClassVar[str]
    service_name: ClassVar[str]
    config_model: ClassVar[type[ResourceConfig]]

    def __init__(
        self,
        client: Any,
        retrier: Optional[MutationRetrier] = None,
        client_token: Optional[str] = None,
    ) -> None:
        self.client = client
        self.retrier = retrier or MutationRetrier(name=self.resource_type)
        self.client_token = client_token or None

    def decode(self, attributes: dict[str, Any]) -> ResourceConfig:
        """Validate an attribute bag into this kind's typed configuration."""
        return self.config_model.model_validate(attributes)

    @abstractmethod
    def create(self, config: ResourceConfig) -> dict[str, Any]:
        """Create the remote resource and return its freshly read attributes."""
        ...

    @abstractmethod
    def read(self, resource_id: str) -> Optional[dict[str, Any]]:
        """Return current attributes, or None when the resource no longer exists."""
        ...

    @abstractmethod
    def update(
        self,
        resource_id: str,
        config: ResourceConfig,
        prior: Optional[ResourceConfig] = None,
    ) -> dict[str, Any]:
        """Apply *config* to an existing resource and return the re-read attributes."""
        ...

    @abstractmethod
    def delete(self, resource_id: str) -> None:
        """Delete the remote resource."""
        ...

    def import_resource(self, resource_id: str) -> dict[str, Any]:
        """Adopt an existing resource by ID."""
        attributes = self.read(resource_id)
        if attributes is None:
            raise KeyError(f"{self.resource_type} not found: {resource_id}")
        return attributes

    # -- Helpers -------------------------------------------------------------

    def _mutate(self, func: Callable[..., Any], **params: Any) -> Any:
        """Call a mutating API through the retrier."""
        return self.retrier.call(func, **params)

    def _read_after_write(self, resource_id: str) -> dict[str, Any]:
        attributes = self.read(resource_id)
        if attributes is None:
            raise RuntimeError(
                f"{self.resource_type} {resource_id} disappeared right after it was written"
            )
        return attributes
