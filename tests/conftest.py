"""Shared pytest fixtures."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker

from iotform import models  # noqa: F401  registers tables on Base.metadata
from iotform.db import Base
from iotform.services.resilience import MutationRetrier


@pytest.fixture
def client_error():
    """Factory for botocore ClientErrors with a given error code."""

    def make(code: str = "ResourceNotFoundException", operation: str = "Describe", status: int = 400):
        return ClientError(
            {
                "Error": {"Code": code, "Message": f"{code} raised by test"},
                "ResponseMetadata": {"HTTPStatusCode": status},
            },
            operation,
        )

    return make


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def retrier(sleeps: list[float]) -> MutationRetrier:
    """Default schedule, sleeping into a list instead of the clock."""
    return MutationRetrier(sleep=sleeps.append, name="test")


@pytest.fixture
def iotanalytics_client() -> MagicMock:
    return MagicMock(name="iotanalytics")


@pytest.fixture
def greengrass_client() -> MagicMock:
    return MagicMock(name="greengrass")


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()
