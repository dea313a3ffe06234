"""IoT Analytics channel: collects raw messages before a pipeline processes them."""

from __future__ import annotations

from ....schemas.iotanalytics import ChannelConfig
from .base import StorageBackedHandler


class ChannelHandler(StorageBackedHandler):
    resource_type = "aws_iotanalytics_channel"
    config_model = ChannelConfig
    noun = "channel"
