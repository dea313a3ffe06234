"""Tests for the IoT Analytics channel and datastore handlers (mocked boto3 client)."""

from __future__ import annotations

import pytest
from botocore.exceptions import ClientError

from iotform.providers.aws.iotanalytics import ChannelHandler, DatastoreHandler

ROLE = "arn:aws:iam::123456789012:role/iotanalytics"


def _described(noun: str, name: str, storage=None, retention=None) -> dict:
    body = {"name": name, "status": "ACTIVE"}
    if storage is not None:
        body["storage"] = storage
    if retention is not None:
        body["retentionPeriod"] = retention
    return {noun: body}


class TestChannelHandler:
    def _make_handler(self, client, retrier=None, **kwargs) -> ChannelHandler:
        return ChannelHandler(client, retrier=retrier, **kwargs)

    def test_create_sends_storage_and_retention(self, iotanalytics_client, retrier):
        iotanalytics_client.describe_channel.return_value = _described(
            "channel", "raw",
            storage={"customerManagedS3": {"bucket": "b", "keyPrefix": "p/", "roleArn": ROLE}},
            retention={"numberOfDays": 7},
        )
        handler = self._make_handler(iotanalytics_client, retrier)
        config = handler.decode({
            "name": "raw",
            "storage": [{"customer_managed_s3": [{"bucket": "b", "key_prefix": "p/", "role_arn": ROLE}]}],
            "retention_period": [{"number_of_days": 7}],
        })

        result = handler.create(config)

        iotanalytics_client.create_channel.assert_called_once_with(
            channelName="raw",
            channelStorage={"customerManagedS3": {"bucket": "b", "roleArn": ROLE, "keyPrefix": "p/"}},
            retentionPeriod={"numberOfDays": 7},
        )
        assert result == {
            "id": "raw",
            "name": "raw",
            "storage": [{
                "customer_managed_s3": [{"bucket": "b", "role_arn": ROLE, "key_prefix": "p/"}],
                "service_managed_s3": [],
            }],
            "retention_period": [{"number_of_days": 7}],
        }

    def test_create_minimal_sends_name_only(self, iotanalytics_client, retrier):
        iotanalytics_client.describe_channel.return_value = _described("channel", "raw")
        handler = self._make_handler(iotanalytics_client, retrier)

        result = handler.create(handler.decode({"name": "raw"}))

        iotanalytics_client.create_channel.assert_called_once_with(channelName="raw")
        assert result["storage"] == []
        assert result["retention_period"] == []

    def test_service_managed_storage(self, iotanalytics_client, retrier):
        iotanalytics_client.describe_channel.return_value = _described(
            "channel", "raw", storage={"serviceManagedS3": {}},
            retention={"unlimited": True},
        )
        handler = self._make_handler(iotanalytics_client, retrier)
        config = handler.decode({
            "name": "raw",
            "storage": [{"service_managed_s3": [{}]}],
            "retention_period": [{"unlimited": True}],
        })

        result = handler.create(config)

        kwargs = iotanalytics_client.create_channel.call_args.kwargs
        assert kwargs["channelStorage"] == {"serviceManagedS3": {}}
        assert kwargs["retentionPeriod"] == {"unlimited": True}
        assert result["storage"] == [{"customer_managed_s3": [], "service_managed_s3": [{}]}]
        assert result["retention_period"] == [{"unlimited": True}]

    def test_create_retries_role_propagation(self, iotanalytics_client, retrier, sleeps, client_error):
        assume_role = client_error("InvalidRequestException", "CreateChannel")
        iotanalytics_client.create_channel.side_effect = [assume_role, assume_role, {}]
        iotanalytics_client.describe_channel.return_value = _described("channel", "raw")
        handler = self._make_handler(iotanalytics_client, retrier)

        handler.create(handler.decode({"name": "raw"}))

        assert iotanalytics_client.create_channel.call_count == 3
        assert sleeps == [1, 2]

    def test_create_raises_last_error_after_schedule(self, iotanalytics_client, retrier, client_error):
        errors = [client_error(f"E{i}", "CreateChannel") for i in range(1, 7)]
        iotanalytics_client.create_channel.side_effect = errors
        handler = self._make_handler(iotanalytics_client, retrier)

        with pytest.raises(ClientError) as exc_info:
            handler.create(handler.decode({"name": "raw"}))

        assert exc_info.value is errors[-1]
        assert iotanalytics_client.create_channel.call_count == 6
        iotanalytics_client.describe_channel.assert_not_called()

    def test_update_is_retried(self, iotanalytics_client, retrier, sleeps, client_error):
        iotanalytics_client.update_channel.side_effect = [client_error("InvalidRequestException"), {}]
        iotanalytics_client.describe_channel.return_value = _described("channel", "raw")
        handler = self._make_handler(iotanalytics_client, retrier)

        handler.update("raw", handler.decode({"name": "raw", "retention_period": [{"number_of_days": 30}]}))

        assert iotanalytics_client.update_channel.call_count == 2
        iotanalytics_client.update_channel.assert_called_with(
            channelName="raw", retentionPeriod={"numberOfDays": 30},
        )
        assert sleeps == [1]

    def test_update_rereads_by_resource_id(self, iotanalytics_client, retrier):
        iotanalytics_client.describe_channel.return_value = _described("channel", "raw")
        handler = self._make_handler(iotanalytics_client, retrier)

        handler.update("raw", handler.decode({"name": "raw"}))

        iotanalytics_client.update_channel.assert_called_once_with(channelName="raw")
        iotanalytics_client.describe_channel.assert_called_once_with(channelName="raw")

    def test_update_rejects_rename(self, iotanalytics_client, retrier):
        handler = self._make_handler(iotanalytics_client, retrier)

        with pytest.raises(ValueError, match="cannot be renamed"):
            handler.update("raw", handler.decode({"name": "raw2"}))

        iotanalytics_client.update_channel.assert_not_called()
        iotanalytics_client.describe_channel.assert_not_called()

    def test_read_missing_returns_none(self, iotanalytics_client, client_error):
        iotanalytics_client.describe_channel.side_effect = client_error("ResourceNotFoundException")
        assert self._make_handler(iotanalytics_client).read("gone") is None

    def test_read_other_error_propagates(self, iotanalytics_client, client_error):
        iotanalytics_client.describe_channel.side_effect = client_error("ThrottlingException")
        with pytest.raises(ClientError):
            self._make_handler(iotanalytics_client).read("raw")

    def test_create_fails_when_resource_vanishes(self, iotanalytics_client, retrier, client_error):
        iotanalytics_client.describe_channel.side_effect = client_error("ResourceNotFoundException")
        handler = self._make_handler(iotanalytics_client, retrier)
        with pytest.raises(RuntimeError, match="disappeared"):
            handler.create(handler.decode({"name": "raw"}))

    def test_delete(self, iotanalytics_client):
        self._make_handler(iotanalytics_client).delete("raw")
        iotanalytics_client.delete_channel.assert_called_once_with(channelName="raw")

    def test_import_passthrough(self, iotanalytics_client):
        iotanalytics_client.describe_channel.return_value = _described("channel", "raw")
        attrs = self._make_handler(iotanalytics_client).import_resource("raw")
        assert attrs["id"] == "raw"

    def test_import_missing_raises(self, iotanalytics_client, client_error):
        iotanalytics_client.describe_channel.side_effect = client_error("ResourceNotFoundException")
        with pytest.raises(KeyError):
            self._make_handler(iotanalytics_client).import_resource("gone")


class TestDatastoreHandler:
    def test_create_uses_datastore_api(self, iotanalytics_client, retrier):
        iotanalytics_client.describe_datastore.return_value = _described(
            "datastore", "store", storage={"serviceManagedS3": {}},
        )
        handler = DatastoreHandler(iotanalytics_client, retrier=retrier)

        result = handler.create(handler.decode({"name": "store", "storage": [{"service_managed_s3": [{}]}]}))

        iotanalytics_client.create_datastore.assert_called_once_with(
            datastoreName="store", datastoreStorage={"serviceManagedS3": {}},
        )
        iotanalytics_client.create_channel.assert_not_called()
        assert result["id"] == "store"

    def test_create_retries(self, iotanalytics_client, retrier, sleeps, client_error):
        iotanalytics_client.create_datastore.side_effect = [client_error("InvalidRequestException")] * 5 + [{}]
        iotanalytics_client.describe_datastore.return_value = _described("datastore", "store")
        handler = DatastoreHandler(iotanalytics_client, retrier=retrier)

        handler.create(handler.decode({"name": "store"}))

        assert iotanalytics_client.create_datastore.call_count == 6
        assert sum(sleeps) >= 26

    def test_read_missing_returns_none(self, iotanalytics_client, client_error):
        iotanalytics_client.describe_datastore.side_effect = client_error("ResourceNotFoundException")
        assert DatastoreHandler(iotanalytics_client).read("store") is None

    def test_delete(self, iotanalytics_client):
        DatastoreHandler(iotanalytics_client).delete("store")
        iotanalytics_client.delete_datastore.assert_called_once_with(datastoreName="store")
