"""Resource state service: drives handlers and records what they did.

Each managed resource is addressed as ``<resource_type>.<name>``. The
service keeps one :class:`ResourceState` row per address and writes an
:class:`ActionLog` row for every lifecycle call, successful or not.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..config import Settings, settings as default_settings
from ..models.action_log import ActionLog
from ..models.resource_state import ResourceState
from ..providers.aws.clients import AWSClients
from ..providers.base import PartialCreateError, ResourceHandler
from .registry import ResourceRegistry, registry as default_registry

logger = logging.getLogger(__name__)


def parse_address(address: str) -> tuple[str, str]:
    """Split ``aws_iotanalytics_channel.raw`` into ``("aws_iotanalytics_channel", "raw")``."""
    resource_type, sep, name = address.partition(".")
    if not sep or not resource_type or not name:
        raise ValueError(f"Invalid resource address '{address}', expected <type>.<name>")
    return resource_type, name


class ResourceManager:
    """Apply, refresh, destroy and import resources against the state store."""

    def __init__(
        self,
        db: Session,
        clients: AWSClients,
        registry: Optional[ResourceRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.db = db
        self.clients = clients
        self.registry = registry or default_registry
        self.settings = settings or default_settings
        self._handlers: dict[str, ResourceHandler] = {}

    def handler_for(self, resource_type: str) -> ResourceHandler:
        if resource_type not in self._handlers:
            self._handlers[resource_type] = self.registry.create_handler(
                resource_type, self.clients, self.settings
            )
        return self._handlers[resource_type]

    # -- Queries -------------------------------------------------------------

    def get(self, address: str) -> ResourceState | None:
        return self.db.query(ResourceState).filter(ResourceState.address == address).first()

    def list_states(self) -> list[ResourceState]:
        return self.db.query(ResourceState).order_by(ResourceState.address).all()

    def history(self, limit: int = 20) -> list[ActionLog]:
        return (
            self.db.query(ActionLog)
            .order_by(ActionLog.created_at.desc())
            .limit(limit)
            .all()
        )

    # -- Lifecycle -----------------------------------------------------------

    def apply(self, address: str, attributes: dict[str, Any]) -> ResourceState:
        """Create the resource at *address*, or update it when it is already managed."""
        resource_type, _ = parse_address(address)
        handler = self.handler_for(resource_type)
        config = handler.decode(attributes)

        state = self.get(address)
        if state is None:
            action = "create"
            logger.info("Creating %s", address)
            try:
                result = self._run(address, action, handler.create, config)
            except PartialCreateError as e:
                self._track_partial(address, resource_type, e.remote_id)
                raise e.error from None
            state = ResourceState(
                address=address,
                resource_type=resource_type,
                remote_id=result["id"],
            )
            self.db.add(state)
        else:
            action = "update"
            prior = handler.decode(state.config) if state.config else None
            logger.info("Updating %s (%s)", address, state.remote_id)
            result = self._run(
                address, action, handler.update, state.remote_id, config, prior
            )
            state.remote_id = result.get("id") or state.remote_id

        state.config = config.to_attributes()
        state.attributes = result
        state.tainted = False
        state.last_read_at = datetime.now(timezone.utc)
        self._log(address, action, "success", {"id": state.remote_id})
        self.db.commit()
        self.db.refresh(state)
        return state

    def refresh(self, address: Optional[str] = None) -> list[ResourceState]:
        """Re-read managed resources, forgetting any that no longer exist.

        Returns the states that are still managed after the refresh.
        """
        if address is not None:
            state = self._require(address)
            states = [state]
        else:
            states = self.list_states()

        remaining: list[ResourceState] = []
        for state in states:
            handler = self.handler_for(state.resource_type)
            attributes = self._run(state.address, "read", handler.read, state.remote_id)
            if attributes is None:
                logger.warning("%s no longer exists remotely, removing from state", state.address)
                self._log(state.address, "read", "success", {"id": state.remote_id, "forgotten": True})
                self.db.delete(state)
                continue
            state.attributes = attributes
            state.last_read_at = datetime.now(timezone.utc)
            self._log(state.address, "read", "success", {"id": state.remote_id})
            remaining.append(state)

        self.db.commit()
        return remaining

    def destroy(self, address: str) -> None:
        """Delete the remote resource and forget it."""
        state = self._require(address)
        handler = self.handler_for(state.resource_type)
        logger.info("Destroying %s (%s)", address, state.remote_id)
        self._run(address, "delete", handler.delete, state.remote_id)

        self.db.delete(state)
        self._log(address, "delete", "success", {"id": state.remote_id})
        self.db.commit()

    def import_resource(self, address: str, resource_id: str) -> ResourceState:
        """Adopt an existing remote resource under *address*."""
        resource_type, _ = parse_address(address)
        if self.get(address) is not None:
            raise ValueError(f"{address} is already managed")

        handler = self.handler_for(resource_type)
        logger.info("Importing %s as %s", resource_id, address)
        attributes = self._run(address, "import", handler.import_resource, resource_id)

        state = ResourceState(
            address=address,
            resource_type=resource_type,
            remote_id=attributes.get("id") or resource_id,
            config={},
            attributes=attributes,
            last_read_at=datetime.now(timezone.utc),
        )
        self.db.add(state)
        self._log(address, "import", "success", {"id": state.remote_id})
        self.db.commit()
        self.db.refresh(state)
        return state

    # -- Internals -----------------------------------------------------------

    def _require(self, address: str) -> ResourceState:
        state = self.get(address)
        if state is None:
            raise KeyError(f"{address} is not managed")
        return state

    def _track_partial(self, address: str, resource_type: str, remote_id: str) -> None:
        """Record a half-created resource so the next apply updates it instead of creating another."""
        logger.warning("%s exists remotely as %s but was not completed, marking tainted", address, remote_id)
        self.db.add(ResourceState(
            address=address,
            resource_type=resource_type,
            remote_id=remote_id,
            config={},
            attributes={},
            tainted=True,
        ))
        self.db.commit()

    def _run(self, address: str, action: str, func, *args: Any) -> Any:
        """Invoke a handler method, recording a failed action log before re-raising."""
        try:
            return func(*args)
        except Exception as e:
            logger.error("%s %s failed: %s", action, address, e)
            self.db.rollback()
            self._log(address, action, "failed", {"error": str(e)})
            self.db.commit()
            raise

    def _log(self, address: str, action: str, status: str, details: dict[str, Any]) -> None:
        self.db.add(ActionLog(
            address=address,
            action_type=action,
            status=status,
            details=details,
        ))
