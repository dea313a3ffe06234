from .group import GroupHandler
from .logger_definition import LoggerDefinitionHandler

__all__ = ["GroupHandler", "LoggerDefinitionHandler"]
