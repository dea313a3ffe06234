"""Typed resource configuration: re-export the top-level models."""

from .greengrass import GroupConfig, LoggerDefinitionConfig
from .iotanalytics import ChannelConfig, DatasetConfig, DatastoreConfig

__all__ = [
    "ChannelConfig",
    "DatasetConfig",
    "DatastoreConfig",
    "GroupConfig",
    "LoggerDefinitionConfig",
]
