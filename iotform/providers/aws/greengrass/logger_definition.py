"""Greengrass logger definition and its versions."""

from __future__ import annotations

import logging
from typing import Any, Optional

from botocore.exceptions import ClientError

from ....schemas.greengrass import LoggerDefinitionConfig
from ...base import PartialCreateError, ResourceHandler
from ..clients import is_not_found
from .codec import flatten_loggers, parse_loggers

logger = logging.getLogger(__name__)


def _logger_sets(config: LoggerDefinitionConfig) -> list[list[str]]:
    # Logger order within a version is not significant
    return [
        sorted(lg.model_dump_json() for lg in version.logger)
        for version in config.logger_definition_version
    ]


class LoggerDefinitionHandler(ResourceHandler):
    resource_type = "aws_greengrass_logger_definition"
    service_name = "greengrass"
    config_model = LoggerDefinitionConfig

    def create(self, config: LoggerDefinitionConfig) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if config.name is not None:
            params["Name"] = config.name
        logger.debug("Creating Greengrass logger definition: %s", params)
        out = self.client.create_logger_definition(**params)
        definition_id = out["Id"]

        try:
            self._create_version(definition_id, config)
        except Exception as e:
            raise PartialCreateError(definition_id, e) from e
        return self._read_after_write(definition_id)

    def read(self, resource_id: str) -> Optional[dict[str, Any]]:
        logger.debug("Reading Greengrass logger definition: %s", resource_id)
        try:
            out = self.client.get_logger_definition(LoggerDefinitionId=resource_id)
        except ClientError as e:
            if is_not_found(e):
                logger.info("Greengrass logger definition %s not found", resource_id)
                return None
            raise
        logger.debug("Received Greengrass logger definition: %s", out)

        attributes: dict[str, Any] = {
            "id": out.get("Id", resource_id),
            "arn": out.get("Arn"),
            "name": out.get("Name"),
            "logger_definition_version": [],
        }
        if out.get("LatestVersion"):
            version = self.client.get_logger_definition_version(
                LoggerDefinitionId=resource_id,
                LoggerDefinitionVersionId=out["LatestVersion"],
            )
            attributes["latest_definition_version_arn"] = version.get("Arn")
            attributes["logger_definition_version"] = [
                flatten_loggers(version.get("Definition") or {}),
            ]
        return attributes

    def update(
        self,
        resource_id: str,
        config: LoggerDefinitionConfig,
        prior: Optional[LoggerDefinitionConfig] = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"LoggerDefinitionId": resource_id}
        if config.name is not None:
            params["Name"] = config.name
        logger.debug("Updating Greengrass logger definition: %s", params)
        self.client.update_logger_definition(**params)

        if prior is None or _logger_sets(prior) != _logger_sets(config):
            self._create_version(resource_id, config)
        return self._read_after_write(resource_id)

    def delete(self, resource_id: str) -> None:
        logger.debug("Deleting Greengrass logger definition: %s", resource_id)
        self.client.delete_logger_definition(LoggerDefinitionId=resource_id)

    def _create_version(self, definition_id: str, config: LoggerDefinitionConfig) -> None:
        if not config.logger_definition_version:
            return
        params: dict[str, Any] = {
            "LoggerDefinitionId": definition_id,
            "Loggers": parse_loggers(config.logger_definition_version[0]),
        }
        if self.client_token:
            params["AmznClientToken"] = self.client_token

        logger.debug("Creating Greengrass logger definition version: %s", params)
        self.client.create_logger_definition_version(**params)
