"""Resource state model: the last applied configuration and read result per address."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base


class ResourceState(Base):
    __tablename__ = "resource_states"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    address: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)  # <type>.<name>
    resource_type: Mapped[str] = mapped_column(String(64), nullable=False)
    remote_id: Mapped[str] = mapped_column(Text, nullable=False)  # channel name, Greengrass group ID, ...
    config: Mapped[dict] = mapped_column(JSON, default=dict)  # desired attributes as last applied
    attributes: Mapped[dict] = mapped_column(JSON, default=dict)  # attributes as last read
    tainted: Mapped[bool] = mapped_column(Boolean, default=False)  # created remotely, never fully applied
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    last_read_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
