"""Greengrass request/response mapping (PascalCase API keys)."""

from __future__ import annotations

from typing import Any

from ....schemas.greengrass import GroupVersion, LoggerDefinitionVersion

# attribute name -> CreateGroupVersion / GroupVersion.Definition key
GROUP_VERSION_FIELDS: dict[str, str] = {
    "connector_definition_version_arn": "ConnectorDefinitionVersionArn",
    "core_definition_version_arn": "CoreDefinitionVersionArn",
    "device_definition_version_arn": "DeviceDefinitionVersionArn",
    "function_definition_version_arn": "FunctionDefinitionVersionArn",
    "logger_definition_version_arn": "LoggerDefinitionVersionArn",
    "resource_definition_version_arn": "ResourceDefinitionVersionArn",
    "subscription_definition_version_arn": "SubscriptionDefinitionVersionArn",
}


def parse_group_version(version: GroupVersion) -> dict[str, Any]:
    request: dict[str, Any] = {}
    for attr, key in GROUP_VERSION_FIELDS.items():
        value = getattr(version, attr)
        if value is not None:
            request[key] = value
    return request


def flatten_group_version(definition: dict[str, Any]) -> dict[str, Any]:
    return {
        attr: definition[key]
        for attr, key in GROUP_VERSION_FIELDS.items()
        if definition.get(key) is not None
    }


def parse_loggers(version: LoggerDefinitionVersion) -> list[dict[str, Any]]:
    loggers: list[dict[str, Any]] = []
    for lg in version.logger:
        request: dict[str, Any] = {
            "Component": lg.component,
            "Id": lg.id,
            "Level": lg.level,
            "Type": lg.type,
        }
        if lg.space is not None:
            request["Space"] = lg.space
        loggers.append(request)
    return loggers


def flatten_loggers(definition: dict[str, Any]) -> dict[str, Any]:
    raw_loggers: list[dict[str, Any]] = []
    for lg in definition.get("Loggers", []):
        raw = {
            "component": lg.get("Component"),
            "id": lg.get("Id"),
            "level": lg.get("Level"),
            "type": lg.get("Type"),
        }
        if lg.get("Space") is not None:
            raw["space"] = lg["Space"]
        raw_loggers.append(raw)
    return {"logger": raw_loggers}
