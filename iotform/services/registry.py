"""Handler registry: maps resource type names to handler classes and builds handlers."""

from __future__ import annotations

from typing import Optional

from ..config import Settings, settings as default_settings
from ..providers.aws.clients import AWSClients
from ..providers.base import ResourceHandler
from .resilience import MutationRetrier


class ResourceRegistry:
    """Central registry mapping resource_type → handler class."""

    def __init__(self) -> None:
        self._handler_classes: dict[str, type[ResourceHandler]] = {}

    # -- Registration --------------------------------------------------------

    def register_handler(self, handler_cls: type[ResourceHandler]) -> None:
        """Register a handler class under its ``resource_type``."""
        self._handler_classes[handler_cls.resource_type] = handler_cls

    @property
    def supported_types(self) -> list[str]:
        return sorted(self._handler_classes)

    def get_handler_class(self, resource_type: str) -> type[ResourceHandler]:
        cls = self._handler_classes.get(resource_type)
        if cls is None:
            raise KeyError(
                f"No handler registered for type '{resource_type}'. "
                f"Supported: {self.supported_types}"
            )
        return cls

    # -- Construction --------------------------------------------------------

    def create_handler(
        self,
        resource_type: str,
        clients: AWSClients,
        settings: Optional[Settings] = None,
    ) -> ResourceHandler:
        """Build a handler wired to its service client, retrier and client token."""
        settings = settings or default_settings
        cls = self.get_handler_class(resource_type)
        return cls(
            clients.client(cls.service_name),
            retrier=MutationRetrier(settings.retry_schedule, name=resource_type),
            client_token=settings.client_token,
        )


def register_default_handlers(reg: ResourceRegistry) -> None:
    """Register every built-in AWS handler."""
    from ..providers.aws.greengrass import GroupHandler, LoggerDefinitionHandler
    from ..providers.aws.iotanalytics import ChannelHandler, DatasetHandler, DatastoreHandler

    for handler_cls in (
        ChannelHandler,
        DatasetHandler,
        DatastoreHandler,
        GroupHandler,
        LoggerDefinitionHandler,
    ):
        reg.register_handler(handler_cls)


# -- Singleton ---------------------------------------------------------------

registry = ResourceRegistry()
register_default_handlers(registry)
