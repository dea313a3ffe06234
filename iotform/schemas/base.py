"""Base classes for typed resource configuration."""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import BaseModel, Field

# Minimal ARN shape: arn:<partition>:<service>:...
Arn = Annotated[str, Field(pattern=r"^arn:[^:]+:[^:]+:")]


class Block(BaseModel):
    """A nested configuration block. Unknown keys are rejected."""

    model_config = {"extra": "forbid"}


class ResourceConfig(Block):
    """Top-level configuration of one resource instance.

    ``id`` is computed: it is accepted so that a bag returned by a read can
    be decoded again, but it is never sent to AWS.
    """

    id: Optional[str] = None

    def to_attributes(self) -> dict[str, Any]:
        """Render back to an attribute bag, dropping unset optional values."""
        return self.model_dump(exclude_none=True)
