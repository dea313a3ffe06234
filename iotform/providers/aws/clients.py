"""AWS SDK client factory.

Handlers never build their own clients: a client is created here once per
service and passed into each handler, so tests can hand in a mock instead.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

# Error codes the IoT Analytics and Greengrass APIs use for a missing resource
NOT_FOUND_CODES = frozenset({"ResourceNotFoundException", "NotFoundException"})


class AWSClients:
    """Lazily-initialised container for boto3 service clients."""

    def __init__(
        self,
        region: Optional[str] = None,
        profile: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        self.region = region
        self.profile = profile
        self.endpoint_url = endpoint_url
        self._session: Optional[boto3.session.Session] = None
        self._clients: dict[str, Any] = {}

    @classmethod
    def from_settings(cls, settings) -> "AWSClients":
        return cls(
            region=settings.region,
            profile=settings.profile,
            endpoint_url=settings.endpoint_url,
        )

    @property
    def session(self) -> boto3.session.Session:
        if self._session is None:
            self._session = boto3.session.Session(
                profile_name=self.profile,
                region_name=self.region,
            )
        return self._session

    def client(self, service_name: str) -> Any:
        """Return the cached client for *service_name*, creating it on first use."""
        if service_name not in self._clients:
            logger.debug("Creating boto3 client for %s (region=%s)", service_name, self.region)
            kwargs: dict[str, Any] = {
                # Mutation retries are handled by MutationRetrier, not botocore
                "config": Config(retries={"mode": "standard", "max_attempts": 3}),
            }
            if self.endpoint_url:
                kwargs["endpoint_url"] = self.endpoint_url
            self._clients[service_name] = self.session.client(service_name, **kwargs)
        return self._clients[service_name]


def is_not_found(error: Exception) -> bool:
    """True when *error* is an AWS error reporting that the resource does not exist."""
    if not isinstance(error, ClientError):
        return False
    code = error.response.get("Error", {}).get("Code", "")
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return code in NOT_FOUND_CODES or status == 404
