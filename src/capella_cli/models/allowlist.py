"""Allowed CIDR wire payloads and state model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from capella_cli.models.common import CouchbaseAuditData


class CreateAllowListRequest(BaseModel):
    """Trusted CIDR to add to a cluster. Use a /32 mask for a single address."""

    model_config = ConfigDict(populate_by_name=True)

    cidr: str
    comment: str | None = None
    expires_at: str | None = Field(default=None, alias="expiresAt")


class GetAllowListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    cidr: str
    comment: str | None = None
    expires_at: str | None = Field(default=None, alias="expiresAt")
    audit: CouchbaseAuditData = Field(default_factory=CouchbaseAuditData)


class AllowListState(BaseModel):
    organization_id: str | None = None
    project_id: str | None = None
    cluster_id: str | None = None
    id: str | None = None
    cidr: str | None = None
    comment: str | None = None
    expires_at: str | None = None
    audit: CouchbaseAuditData | None = None

    @classmethod
    def from_response(
        cls,
        resp: GetAllowListResponse,
        organization_id: str,
        project_id: str,
        cluster_id: str,
    ) -> AllowListState:
        return cls(
            organization_id=organization_id,
            project_id=project_id,
            cluster_id=cluster_id,
            id=resp.id,
            cidr=resp.cidr,
            comment=resp.comment,
            expires_at=resp.expires_at,
            audit=resp.audit,
        )
