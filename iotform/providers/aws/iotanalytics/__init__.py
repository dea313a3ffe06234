from .channel import ChannelHandler
from .dataset import DatasetHandler
from .datastore import DatastoreHandler

__all__ = ["ChannelHandler", "DatasetHandler", "DatastoreHandler"]
