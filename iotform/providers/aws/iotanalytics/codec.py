"""IoT Analytics request/response mapping.

``parse_*`` turns typed configuration into boto3 request fragments
(camelCase keys); ``flatten_*`` turns describe responses back into
attribute bags (snake_case keys, single blocks wrapped in lists).
"""

from __future__ import annotations

from typing import Any, Optional

from ....schemas.iotanalytics import (
    ContainerAction,
    ContentDeliveryRule,
    DatasetAction,
    DatasetConfig,
    Destination,
    QueryAction,
    QueryFilter,
    RetentionPeriod,
    S3Destination,
    Storage,
    Trigger,
    Variable,
    VersioningConfiguration,
)


def wrap_in_list(mapping: Optional[dict[str, Any]]) -> list[dict[str, Any]]:
    return [] if mapping is None else [mapping]


# ---------------------------------------------------------------------------
# Storage and retention
# ---------------------------------------------------------------------------


def parse_storage(storage: Storage) -> dict[str, Any]:
    request: dict[str, Any] = {}
    if storage.customer_managed_s3:
        cm = storage.customer_managed_s3[0]
        customer_managed: dict[str, Any] = {"bucket": cm.bucket, "roleArn": cm.role_arn}
        if cm.key_prefix:
            customer_managed["keyPrefix"] = cm.key_prefix
        request["customerManagedS3"] = customer_managed
    if storage.service_managed_s3:
        request["serviceManagedS3"] = {}
    return request


def parse_retention_period(retention: RetentionPeriod) -> dict[str, Any]:
    request: dict[str, Any] = {}
    if retention.number_of_days is not None:
        request["numberOfDays"] = retention.number_of_days
    if retention.unlimited is not None:
        request["unlimited"] = retention.unlimited
    return request


def flatten_storage(storage: Optional[dict[str, Any]]) -> list[dict[str, Any]]:
    storage = storage or {}
    customer_managed = storage.get("customerManagedS3")
    service_managed = storage.get("serviceManagedS3")
    if customer_managed is None and service_managed is None:
        return []

    raw_customer_managed = None
    if customer_managed is not None:
        raw_customer_managed = {
            "bucket": customer_managed.get("bucket"),
            "role_arn": customer_managed.get("roleArn"),
        }
        if customer_managed.get("keyPrefix") is not None:
            raw_customer_managed["key_prefix"] = customer_managed["keyPrefix"]

    return [{
        "customer_managed_s3": wrap_in_list(raw_customer_managed),
        "service_managed_s3": wrap_in_list({} if service_managed is not None else None),
    }]


def flatten_retention_period(retention: Optional[dict[str, Any]]) -> list[dict[str, Any]]:
    if not retention:
        return []
    raw: dict[str, Any] = {}
    if retention.get("numberOfDays") is not None:
        raw["number_of_days"] = retention["numberOfDays"]
    if retention.get("unlimited") is not None:
        raw["unlimited"] = retention["unlimited"]
    return [raw]


# ---------------------------------------------------------------------------
# Dataset: parse
# ---------------------------------------------------------------------------


def parse_variable(variable: Variable) -> dict[str, Any]:
    request: dict[str, Any] = {"name": variable.name}
    if variable.string_value is not None:
        request["stringValue"] = variable.string_value
    if variable.double_value is not None:
        request["doubleValue"] = variable.double_value
    if variable.dataset_content_version_value:
        request["datasetContentVersionValue"] = {
            "datasetName": variable.dataset_content_version_value[0].dataset_name,
        }
    if variable.output_file_uri_value:
        request["outputFileUriValue"] = {
            "fileName": variable.output_file_uri_value[0].file_name,
        }
    return request


def parse_container_action(action: ContainerAction) -> dict[str, Any]:
    resources = action.resource_configuration[0]
    return {
        "image": action.image,
        "executionRoleArn": action.execution_role_arn,
        "resourceConfiguration": {
            "computeType": resources.compute_type,
            "volumeSizeInGB": resources.volume_size_in_gb,
        },
        "variables": [parse_variable(v) for v in action.variable],
    }


def parse_query_filter(query_filter: QueryFilter) -> dict[str, Any]:
    delta = query_filter.delta_time[0]
    return {
        "deltaTime": {
            "offsetSeconds": delta.offset_seconds,
            "timeExpression": delta.time_expression,
        },
    }


def parse_query_action(action: QueryAction) -> dict[str, Any]:
    return {
        "sqlQuery": action.sql_query,
        "filters": [parse_query_filter(f) for f in action.filter],
    }


def parse_dataset_action(action: DatasetAction) -> dict[str, Any]:
    request: dict[str, Any] = {"actionName": action.name}
    if action.query_action:
        request["queryAction"] = parse_query_action(action.query_action[0])
    if action.container_action:
        request["containerAction"] = parse_container_action(action.container_action[0])
    return request


def parse_s3_destination(destination: S3Destination) -> dict[str, Any]:
    request: dict[str, Any] = {
        "bucket": destination.bucket,
        "key": destination.key,
        "roleArn": destination.role_arn,
    }
    if destination.glue_configuration:
        glue = destination.glue_configuration[0]
        request["glueConfiguration"] = {
            "databaseName": glue.database_name,
            "tableName": glue.table_name,
        }
    return request


def parse_destination(destination: Destination) -> dict[str, Any]:
    request: dict[str, Any] = {}
    if destination.iotevents_destination:
        iotevents = destination.iotevents_destination[0]
        request["iotEventsDestinationConfiguration"] = {
            "inputName": iotevents.input_name,
            "roleArn": iotevents.role_arn,
        }
    if destination.s3_destination:
        request["s3DestinationConfiguration"] = parse_s3_destination(destination.s3_destination[0])
    return request


def parse_content_delivery_rule(rule: ContentDeliveryRule) -> dict[str, Any]:
    request: dict[str, Any] = {"destination": parse_destination(rule.destination[0])}
    if rule.entry_name is not None:
        request["entryName"] = rule.entry_name
    return request


def parse_trigger(trigger: Trigger) -> dict[str, Any]:
    request: dict[str, Any] = {}
    if trigger.schedule:
        request["schedule"] = {"expression": trigger.schedule[0].expression}
    return request


def parse_versioning_configuration(versioning: VersioningConfiguration) -> dict[str, Any]:
    request: dict[str, Any] = {}
    if versioning.max_versions is not None:
        request["maxVersions"] = versioning.max_versions
    if versioning.unlimited is not None:
        request["unlimited"] = versioning.unlimited
    return request


def parse_dataset(config: DatasetConfig) -> dict[str, Any]:
    """Build the request body shared by CreateDataset and UpdateDataset."""
    params: dict[str, Any] = {
        "datasetName": config.name,
        "actions": [parse_dataset_action(a) for a in config.action],
        "contentDeliveryRules": [parse_content_delivery_rule(r) for r in config.content_delivery_rule],
        "triggers": [parse_trigger(t) for t in config.trigger],
    }
    if config.retention_period:
        params["retentionPeriod"] = parse_retention_period(config.retention_period[0])
    if config.versioning_configuration:
        params["versioningConfiguration"] = parse_versioning_configuration(
            config.versioning_configuration[0]
        )
    return params


# ---------------------------------------------------------------------------
# Dataset: flatten
# ---------------------------------------------------------------------------


def flatten_variable(variable: dict[str, Any]) -> dict[str, Any]:
    raw: dict[str, Any] = {"name": variable.get("name")}
    if variable.get("stringValue") is not None:
        raw["string_value"] = variable["stringValue"]
    if variable.get("doubleValue") is not None:
        raw["double_value"] = variable["doubleValue"]
    if variable.get("outputFileUriValue") is not None:
        raw["output_file_uri_value"] = [
            {"file_name": variable["outputFileUriValue"].get("fileName")},
        ]
    if variable.get("datasetContentVersionValue") is not None:
        raw["dataset_content_version_value"] = [
            {"dataset_name": variable["datasetContentVersionValue"].get("datasetName")},
        ]
    return raw


def flatten_container_action(action: dict[str, Any]) -> dict[str, Any]:
    resources = action.get("resourceConfiguration") or {}
    return {
        "image": action.get("image"),
        "execution_role_arn": action.get("executionRoleArn"),
        "resource_configuration": [{
            "compute_type": resources.get("computeType"),
            "volume_size_in_gb": resources.get("volumeSizeInGB"),
        }],
        "variable": [flatten_variable(v) for v in action.get("variables", [])],
    }


def flatten_query_filter(query_filter: dict[str, Any]) -> dict[str, Any]:
    delta = query_filter.get("deltaTime") or {}
    return {
        "delta_time": [{
            "offset_seconds": delta.get("offsetSeconds"),
            "time_expression": delta.get("timeExpression"),
        }],
    }


def flatten_query_action(action: dict[str, Any]) -> dict[str, Any]:
    return {
        "sql_query": action.get("sqlQuery"),
        "filter": [flatten_query_filter(f) for f in action.get("filters", [])],
    }


def flatten_dataset_action(action: dict[str, Any]) -> dict[str, Any]:
    raw: dict[str, Any] = {"name": action.get("actionName")}
    if action.get("queryAction") is not None:
        raw["query_action"] = [flatten_query_action(action["queryAction"])]
    if action.get("containerAction") is not None:
        raw["container_action"] = [flatten_container_action(action["containerAction"])]
    return raw


def flatten_s3_destination(destination: dict[str, Any]) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "bucket": destination.get("bucket"),
        "key": destination.get("key"),
        "role_arn": destination.get("roleArn"),
    }
    glue = destination.get("glueConfiguration")
    if glue is not None:
        raw["glue_configuration"] = [{
            "database_name": glue.get("databaseName"),
            "table_name": glue.get("tableName"),
        }]
    return raw


def flatten_destination(destination: dict[str, Any]) -> dict[str, Any]:
    raw: dict[str, Any] = {}
    iotevents = destination.get("iotEventsDestinationConfiguration")
    if iotevents is not None:
        raw["iotevents_destination"] = [{
            "input_name": iotevents.get("inputName"),
            "role_arn": iotevents.get("roleArn"),
        }]
    s3 = destination.get("s3DestinationConfiguration")
    if s3 is not None:
        raw["s3_destination"] = [flatten_s3_destination(s3)]
    return raw


def flatten_content_delivery_rule(rule: dict[str, Any]) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "destination": [flatten_destination(rule.get("destination") or {})],
    }
    if rule.get("entryName") is not None:
        raw["entry_name"] = rule["entryName"]
    return raw


def flatten_trigger(trigger: dict[str, Any]) -> dict[str, Any]:
    raw: dict[str, Any] = {}
    schedule = trigger.get("schedule")
    if schedule is not None:
        raw["schedule"] = [{"expression": schedule.get("expression")}]
    return raw


def flatten_versioning_configuration(versioning: Optional[dict[str, Any]]) -> list[dict[str, Any]]:
    if versioning is None:
        return []
    raw: dict[str, Any] = {}
    if versioning.get("maxVersions") is not None:
        raw["max_versions"] = versioning["maxVersions"]
    if versioning.get("unlimited") is not None:
        raw["unlimited"] = versioning["unlimited"]
    return [raw]


def flatten_dataset(dataset: dict[str, Any]) -> dict[str, Any]:
    """Render a DescribeDataset ``dataset`` object as an attribute bag."""
    return {
        "id": dataset.get("name"),
        "name": dataset.get("name"),
        "action": [flatten_dataset_action(a) for a in dataset.get("actions", [])],
        "content_delivery_rule": [
            flatten_content_delivery_rule(r) for r in dataset.get("contentDeliveryRules", [])
        ],
        "retention_period": flatten_retention_period(dataset.get("retentionPeriod")),
        "trigger": [flatten_trigger(t) for t in dataset.get("triggers", [])],
        "versioning_configuration": flatten_versioning_configuration(
            dataset.get("versioningConfiguration")
        ),
    }
