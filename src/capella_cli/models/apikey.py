"""API key wire payloads and state model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from capella_cli.models.common import CouchbaseAuditData

ORGANIZATION_OWNER = "organizationOwner"


class ApiKeyResourceItem(BaseModel):
    """Roles granted to the key on a single project."""

    id: str
    type: str | None = None
    roles: list[str] = Field(default_factory=list)


class CreateApiKeyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str | None = None
    expiry: float | None = None
    organization_roles: list[str] = Field(alias="organizationRoles")
    resources: list[ApiKeyResourceItem] | None = None
    allowed_cidrs: list[str] | None = Field(default=None, alias="allowedCIDRs")


class CreateApiKeyResponse(BaseModel):
    id: str
    token: str


class RotateApiKeyRequest(BaseModel):
    secret: str | None = None


class RotateApiKeyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    secret_key: str = Field(alias="secretKey")


class GetApiKeyResponse(BaseModel):
    """An API key as returned by the get and list endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str = ""
    expiry: float = 0
    allowed_cidrs: list[str] = Field(default_factory=list, alias="allowedCIDRs")
    organization_roles: list[str] = Field(default_factory=list, alias="organizationRoles")
    resources: list[ApiKeyResourceItem] = Field(default_factory=list)
    audit: CouchbaseAuditData = Field(default_factory=CouchbaseAuditData)


class ApiKeyState(BaseModel):
    """Tracked state of one API key.

    ``rotate`` is a counter: each rotation must use a strictly larger value.
    ``token`` and ``secret`` are only known locally and survive refreshes.
    """

    organization_id: str | None = None
    id: str | None = None
    name: str | None = None
    description: str | None = None
    expiry: float | None = None
    allowed_cidrs: list[str] | None = None
    organization_roles: list[str] | None = None
    resources: list[ApiKeyResourceItem] = Field(default_factory=list)
    rotate: int | None = None
    secret: str | None = None
    token: str | None = None
    audit: CouchbaseAuditData | None = None

    @classmethod
    def from_response(cls, resp: GetApiKeyResponse, organization_id: str) -> ApiKeyState:
        return cls(
            organization_id=organization_id,
            id=resp.id,
            name=resp.name,
            description=resp.description,
            expiry=resp.expiry,
            allowed_cidrs=list(resp.allowed_cidrs),
            organization_roles=list(resp.organization_roles),
            resources=list(resp.resources),
            audit=resp.audit,
        )

    @property
    def is_org_owner(self) -> bool:
        return ORGANIZATION_OWNER in (self.organization_roles or [])
