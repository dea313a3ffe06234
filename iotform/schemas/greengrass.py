"""Typed configuration for Greengrass groups and logger definitions."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import Block, ResourceConfig


class GroupVersion(Block):
    connector_definition_version_arn: Optional[str] = None
    core_definition_version_arn: Optional[str] = None
    device_definition_version_arn: Optional[str] = None
    function_definition_version_arn: Optional[str] = None
    logger_definition_version_arn: Optional[str] = None
    resource_definition_version_arn: Optional[str] = None
    subscription_definition_version_arn: Optional[str] = None


class GroupConfig(ResourceConfig):
    name: str = Field(..., min_length=1)
    group_version: list[GroupVersion] = Field(default_factory=list, max_length=1)

    # computed
    arn: Optional[str] = None
    group_id: Optional[str] = None


class Logger(Block):
    component: str
    id: str
    level: str
    type: str
    space: Optional[int] = None


class LoggerDefinitionVersion(Block):
    logger: list[Logger] = Field(default_factory=list)


class LoggerDefinitionConfig(ResourceConfig):
    name: Optional[str] = None
    logger_definition_version: list[LoggerDefinitionVersion] = Field(
        default_factory=list, max_length=1
    )

    # computed
    arn: Optional[str] = None
    latest_definition_version_arn: Optional[str] = None
