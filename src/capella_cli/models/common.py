"""Common response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CouchbaseAuditData(BaseModel):
    """Audit fields attached to every Capella resource."""

    model_config = ConfigDict(populate_by_name=True)

    created_at: str | None = Field(default=None, alias="createdAt")
    created_by: str | None = Field(default=None, alias="createdBy")
    modified_at: str | None = Field(default=None, alias="modifiedAt")
    modified_by: str | None = Field(default=None, alias="modifiedBy")
    version: int | None = None


class CreatedResponse(BaseModel):
    """Body of a create call that only echoes the new id."""

    id: str


def is_trimmed(value: str) -> bool:
    return value == value.strip()
