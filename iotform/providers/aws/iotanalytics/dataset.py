"""IoT Analytics dataset: SQL or container actions over a datastore."""

from __future__ import annotations

import logging
from typing import Any, Optional

from botocore.exceptions import ClientError

from ....schemas.iotanalytics import DatasetConfig
from ...base import ResourceHandler
from ..clients import is_not_found
from .base import ensure_same_name
from .codec import flatten_dataset, parse_dataset

logger = logging.getLogger(__name__)


class DatasetHandler(ResourceHandler):
    resource_type = "aws_iotanalytics_dataset"
    service_name = "iotanalytics"
    config_model = DatasetConfig

    def create(self, config: DatasetConfig) -> dict[str, Any]:
        params = parse_dataset(config)
        logger.debug("Creating IoT Analytics dataset: %s", params)
        self.client.create_dataset(**params)
        return self._read_after_write(config.name)

    def read(self, resource_id: str) -> Optional[dict[str, Any]]:
        logger.debug("Reading IoT Analytics dataset: %s", resource_id)
        try:
            out = self.client.describe_dataset(datasetName=resource_id)
        except ClientError as e:
            if is_not_found(e):
                logger.info("IoT Analytics dataset %s not found", resource_id)
                return None
            raise
        return flatten_dataset(out["dataset"])

    def update(
        self,
        resource_id: str,
        config: DatasetConfig,
        prior: Optional[DatasetConfig] = None,
    ) -> dict[str, Any]:
        ensure_same_name("dataset", resource_id, config)
        params = parse_dataset(config)
        logger.debug("Updating IoT Analytics dataset: %s", params)
        self.client.update_dataset(**params)
        return self._read_after_write(resource_id)

    def delete(self, resource_id: str) -> None:
        logger.debug("Deleting IoT Analytics dataset: %s", resource_id)
        self.client.delete_dataset(datasetName=resource_id)
