"""Typed configuration for IoT Analytics channels, datastores and datasets.

Single nested blocks are lists holding at most one item, mirroring the
attribute bag layout; repeated blocks are plain lists.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator

from .base import Arn, Block, ResourceConfig

# ---------------------------------------------------------------------------
# Storage and retention (channel + datastore)
# ---------------------------------------------------------------------------


class CustomerManagedS3(Block):
    bucket: str = Field(..., min_length=1)
    key_prefix: Optional[str] = None
    role_arn: str = Field(..., min_length=1)


class ServiceManagedS3(Block):
    pass


class Storage(Block):
    customer_managed_s3: list[CustomerManagedS3] = Field(default_factory=list, max_length=1)
    service_managed_s3: list[ServiceManagedS3] = Field(default_factory=list, max_length=1)

    @model_validator(mode="after")
    def _single_storage_kind(self) -> "Storage":
        if self.customer_managed_s3 and self.service_managed_s3:
            raise ValueError("customer_managed_s3 conflicts with service_managed_s3")
        return self


class RetentionPeriod(Block):
    number_of_days: Optional[int] = Field(None, ge=1)
    unlimited: Optional[bool] = None

    @model_validator(mode="after")
    def _days_or_unlimited(self) -> "RetentionPeriod":
        if self.number_of_days is not None and self.unlimited:
            raise ValueError("number_of_days conflicts with unlimited")
        return self


class ChannelConfig(ResourceConfig):
    name: str = Field(..., min_length=1)
    storage: list[Storage] = Field(default_factory=list, max_length=1)
    retention_period: list[RetentionPeriod] = Field(default_factory=list, max_length=1)


class DatastoreConfig(ChannelConfig):
    """Datastores take the same storage and retention blocks as channels."""


# ---------------------------------------------------------------------------
# Dataset actions
# ---------------------------------------------------------------------------


class DatasetContentVersionValue(Block):
    dataset_name: str


class OutputFileUriValue(Block):
    file_name: str


class Variable(Block):
    name: str
    string_value: Optional[str] = None
    double_value: Optional[float] = None
    dataset_content_version_value: list[DatasetContentVersionValue] = Field(
        default_factory=list, max_length=1
    )
    output_file_uri_value: list[OutputFileUriValue] = Field(default_factory=list, max_length=1)


class ResourceConfiguration(Block):
    compute_type: str
    volume_size_in_gb: int = Field(..., ge=1)


class ContainerAction(Block):
    image: str
    execution_role_arn: Arn
    resource_configuration: list[ResourceConfiguration] = Field(..., min_length=1, max_length=1)
    variable: list[Variable] = Field(default_factory=list)


class DeltaTime(Block):
    offset_seconds: int
    time_expression: str


class QueryFilter(Block):
    delta_time: list[DeltaTime] = Field(..., min_length=1, max_length=1)


class QueryAction(Block):
    sql_query: str = Field(..., min_length=1)
    filter: list[QueryFilter] = Field(default_factory=list)


class DatasetAction(Block):
    name: str
    query_action: list[QueryAction] = Field(default_factory=list, max_length=1)
    container_action: list[ContainerAction] = Field(default_factory=list, max_length=1)

    @model_validator(mode="after")
    def _exactly_one_kind(self) -> "DatasetAction":
        if bool(self.query_action) == bool(self.container_action):
            raise ValueError(
                f"action '{self.name}' must define exactly one of query_action or container_action"
            )
        return self


# ---------------------------------------------------------------------------
# Dataset delivery, triggers, versioning
# ---------------------------------------------------------------------------


class GlueConfiguration(Block):
    database_name: str
    table_name: str


class S3Destination(Block):
    bucket: str
    key: str
    role_arn: Arn
    glue_configuration: list[GlueConfiguration] = Field(default_factory=list, max_length=1)


class IotEventsDestination(Block):
    input_name: str
    role_arn: Arn


class Destination(Block):
    iotevents_destination: list[IotEventsDestination] = Field(default_factory=list, max_length=1)
    s3_destination: list[S3Destination] = Field(default_factory=list, max_length=1)


class ContentDeliveryRule(Block):
    entry_name: Optional[str] = None
    destination: list[Destination] = Field(..., min_length=1, max_length=1)


class Schedule(Block):
    expression: str


class Trigger(Block):
    schedule: list[Schedule] = Field(default_factory=list, max_length=1)


class VersioningConfiguration(Block):
    max_versions: Optional[int] = Field(None, ge=1)
    unlimited: Optional[bool] = None

    @model_validator(mode="after")
    def _max_or_unlimited(self) -> "VersioningConfiguration":
        if self.max_versions is not None and self.unlimited:
            raise ValueError("max_versions conflicts with unlimited")
        return self


class DatasetConfig(ResourceConfig):
    name: str = Field(..., min_length=1)
    action: list[DatasetAction] = Field(..., min_length=1)
    content_delivery_rule: list[ContentDeliveryRule] = Field(default_factory=list)
    retention_period: list[RetentionPeriod] = Field(default_factory=list, max_length=1)
    trigger: list[Trigger] = Field(default_factory=list, max_length=5)
    versioning_configuration: list[VersioningConfiguration] = Field(
        default_factory=list, max_length=1
    )
