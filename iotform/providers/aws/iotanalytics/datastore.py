"""IoT Analytics datastore: holds processed messages for dataset queries."""

from __future__ import annotations

from ....schemas.iotanalytics import DatastoreConfig
from .base import StorageBackedHandler


class DatastoreHandler(StorageBackedHandler):
    resource_type = "aws_iotanalytics_datastore"
    config_model = DatastoreConfig
    noun = "datastore"
