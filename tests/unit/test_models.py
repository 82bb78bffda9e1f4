"""Tests for wire models and API key plan helpers."""

from __future__ import annotations

import base64

import pytest
from pydantic import ValidationError as PydanticValidationError

from capella_cli.client.errors import ValidationError
from capella_cli.models import (
    ApiKeyResourceItem,
    ApiKeyState,
    BackupScheduleRequest,
    CreateApiKeyRequest,
    GetAllowListResponse,
    GetApiKeyResponse,
    WeeklySchedule,
)
from capella_cli.resources.apikey import encode_token, retain_resources_if_org_owner, validate_create_plan

PROJECT = "ffffffff-aaaa-1414-eeee-000000000001"


def _plan(**overrides) -> ApiKeyState:
    fields = {
        "organization_id": "org-1",
        "name": "ci-key",
        "organization_roles": ["organizationMember"],
    }
    fields.update(overrides)
    return ApiKeyState(**fields)


class TestWireModels:
    def test_api_key_response_aliases(self, api_key_payload):
        resp = GetApiKeyResponse.model_validate(api_key_payload)
        assert resp.allowed_cidrs == ["10.0.0.0/8"]
        assert resp.audit.created_by == "user-1"
        assert resp.resources[0].roles == ["projectViewer"]

    def test_allowlist_missing_audit(self, allowlist_payload):
        resp = GetAllowListResponse.model_validate(allowlist_payload)
        assert resp.expires_at == "2030-01-01T00:00:00Z"
        assert resp.audit.version is None

    def test_create_request_dump(self):
        req = CreateApiKeyRequest(name="k", organization_roles=["organizationOwner"], allowed_cidrs=["0.0.0.0/0"])
        assert req.model_dump(by_alias=True, exclude_none=True) == {
            "name": "k",
            "organizationRoles": ["organizationOwner"],
            "allowedCIDRs": ["0.0.0.0/0"],
        }

    def test_backup_request_dump(self, schedule_payload):
        weekly = WeeklySchedule.model_validate(schedule_payload["weeklySchedule"])
        body = BackupScheduleRequest(weekly_schedule=weekly).model_dump(by_alias=True)
        assert body == schedule_payload

    def test_start_at_range(self):
        with pytest.raises(PydanticValidationError):
            WeeklySchedule(day_of_week="monday", start_at=24, incremental_every=4, retention_time="30days")


class TestValidateCreatePlan:
    def test_valid(self):
        validate_create_plan(_plan(resources=[ApiKeyResourceItem(id=PROJECT, roles=["projectViewer"])]))

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"organization_id": None}, "organizationId cannot be empty"),
            ({"name": ""}, "name cannot be empty"),
            ({"organization_roles": None}, "organizationRoles cannot be empty"),
            ({"rotate": 1}, "rotate value should not be set"),
            ({"secret": "s"}, "secret should not be set"),
            ({"name": " padded"}, "name should not have leading or trailing spaces"),
            ({"description": "x "}, "description should not have leading or trailing spaces"),
            ({"resources": [ApiKeyResourceItem(id="not-a-uuid")]}, "is not valid uuid"),
        ],
    )
    def test_invalid(self, overrides, message):
        with pytest.raises(ValidationError, match=message):
            validate_create_plan(_plan(**overrides))


class TestHelpers:
    def test_encode_token(self):
        token = encode_token("key-1", "s3cret")
        assert base64.b64decode(token) == b"key-1:s3cret"

    def test_org_owner_keeps_plan_resources(self):
        plan = _plan(resources=[ApiKeyResourceItem(id=PROJECT, roles=["projectOwner"])])
        refreshed = _plan(organization_roles=["organizationOwner"], resources=[])
        assert retain_resources_if_org_owner(plan, refreshed).resources == plan.resources

    def test_member_uses_server_resources(self):
        plan = _plan(resources=[ApiKeyResourceItem(id=PROJECT)])
        refreshed = _plan(resources=[])
        assert retain_resources_if_org_owner(plan, refreshed).resources == []
