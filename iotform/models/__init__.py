"""iotform data models: re-export all models for convenient imports."""

from .action_log import ActionLog
from .resource_state import ResourceState

__all__ = [
    "ActionLog",
    "ResourceState",
]
