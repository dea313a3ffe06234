"""Greengrass group: a named group plus an immutable version pointing at definitions.

Every change to the ``group_version`` block creates a new group version;
Greengrass never edits an existing one.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from botocore.exceptions import ClientError

from ....schemas.greengrass import GroupConfig
from ...base import PartialCreateError, ResourceHandler
from ..clients import is_not_found
from .codec import flatten_group_version, parse_group_version

logger = logging.getLogger(__name__)


class GroupHandler(ResourceHandler):
    resource_type = "aws_greengrass_group"
    service_name = "greengrass"
    config_model = GroupConfig

    def create(self, config: GroupConfig) -> dict[str, Any]:
        params = {"Name": config.name}
        logger.debug("Creating Greengrass group: %s", params)
        out = self.client.create_group(**params)
        group_id = out["Id"]

        try:
            self._create_version(group_id, config)
        except Exception as e:
            raise PartialCreateError(group_id, e) from e
        return self._read_after_write(group_id)

    def read(self, resource_id: str) -> Optional[dict[str, Any]]:
        logger.debug("Reading Greengrass group: %s", resource_id)
        try:
            out = self.client.get_group(GroupId=resource_id)
        except ClientError as e:
            if is_not_found(e):
                logger.info("Greengrass group %s not found", resource_id)
                return None
            raise
        logger.debug("Received Greengrass group: %s", out)

        attributes: dict[str, Any] = {
            "id": out.get("Id"),
            "arn": out.get("Arn"),
            "name": out.get("Name"),
            "group_id": out.get("Id"),
            "group_version": [],
        }
        if out.get("LatestVersion"):
            attributes["group_version"] = [self._read_version(resource_id, out["LatestVersion"])]
        return attributes

    def update(
        self,
        resource_id: str,
        config: GroupConfig,
        prior: Optional[GroupConfig] = None,
    ) -> dict[str, Any]:
        params = {"GroupId": resource_id, "Name": config.name}
        logger.debug("Updating Greengrass group: %s", params)
        self.client.update_group(**params)

        if prior is None or prior.group_version != config.group_version:
            self._create_version(resource_id, config)
        return self._read_after_write(resource_id)

    def delete(self, resource_id: str) -> None:
        logger.debug("Deleting Greengrass group: %s", resource_id)
        try:
            self.client.delete_group(GroupId=resource_id)
        except ClientError as e:
            if not is_not_found(e):
                raise
            logger.info("Greengrass group %s already deleted", resource_id)

    # -- Versions ------------------------------------------------------------

    def _create_version(self, group_id: str, config: GroupConfig) -> None:
        if not config.group_version:
            return
        params: dict[str, Any] = {"GroupId": group_id}
        if self.client_token:
            params["AmznClientToken"] = self.client_token
        params.update(parse_group_version(config.group_version[0]))

        logger.debug("Creating Greengrass group version: %s", params)
        self.client.create_group_version(**params)

    def _read_version(self, group_id: str, version_id: str) -> dict[str, Any]:
        logger.debug("Reading Greengrass group version: %s/%s", group_id, version_id)
        out = self.client.get_group_version(GroupId=group_id, GroupVersionId=version_id)
        logger.debug("Received Greengrass group version: %s", out)
        return flatten_group_version(out.get("Definition") or {})
