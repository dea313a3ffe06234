"""Shared lifecycle for IoT Analytics channels and datastores.

Both kinds take a name, an optional storage block and an optional retention
period, and both assume an IAM role when storage is customer managed. The
API differs only by noun: ``create_channel(channelName=..., channelStorage=...)``
versus ``create_datastore(datastoreName=..., datastoreStorage=...)``.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Optional

from botocore.exceptions import ClientError

from ...base import ResourceHandler
from ..clients import is_not_found
from .codec import flatten_retention_period, flatten_storage, parse_retention_period, parse_storage

logger = logging.getLogger(__name__)


def ensure_same_name(noun: str, resource_id: str, config) -> None:
    """IoT Analytics names are identities: an existing resource cannot be renamed."""
    if config.name != resource_id:
        raise ValueError(
            f"IoT Analytics {noun} '{resource_id}' cannot be renamed to '{config.name}'; "
            "destroy it and apply the new name instead"
        )


class StorageBackedHandler(ResourceHandler):
    """Channel/datastore handler; subclasses set ``noun``."""

    service_name = "iotanalytics"
    noun: ClassVar[str]

    def _params(self, config) -> dict[str, Any]:
        params: dict[str, Any] = {f"{self.noun}Name": config.name}
        if config.storage:
            params[f"{self.noun}Storage"] = parse_storage(config.storage[0])
        if config.retention_period:
            params["retentionPeriod"] = parse_retention_period(config.retention_period[0])
        return params

    def create(self, config) -> dict[str, Any]:
        params = self._params(config)
        logger.debug("Creating IoT Analytics %s: %s", self.noun, params)
        self._mutate(getattr(self.client, f"create_{self.noun}"), **params)
        return self._read_after_write(config.name)

    def read(self, resource_id: str) -> Optional[dict[str, Any]]:
        params = {f"{self.noun}Name": resource_id}
        logger.debug("Reading IoT Analytics %s: %s", self.noun, params)
        try:
            out = getattr(self.client, f"describe_{self.noun}")(**params)
        except ClientError as e:
            if is_not_found(e):
                logger.info("IoT Analytics %s %s not found", self.noun, resource_id)
                return None
            raise

        described = out[self.noun]
        return {
            "id": described.get("name"),
            "name": described.get("name"),
            "storage": flatten_storage(described.get("storage")),
            "retention_period": flatten_retention_period(described.get("retentionPeriod")),
        }

    def update(self, resource_id: str, config, prior=None) -> dict[str, Any]:
        ensure_same_name(self.noun, resource_id, config)
        params = self._params(config)
        logger.debug("Updating IoT Analytics %s: %s", self.noun, params)
        # Changing role_arn can hit the same propagation race as create
        self._mutate(getattr(self.client, f"update_{self.noun}"), **params)
        return self._read_after_write(resource_id)

    def delete(self, resource_id: str) -> None:
        params = {f"{self.noun}Name": resource_id}
        logger.debug("Deleting IoT Analytics %s: %s", self.noun, params)
        getattr(self.client, f"delete_{self.noun}")(**params)
