"""Pydantic data models for the Capella V4 API."""

from capella_cli.models.allowlist import AllowListState, CreateAllowListRequest, GetAllowListResponse
from capella_cli.models.apikey import (
    ApiKeyResourceItem,
    ApiKeyState,
    CreateApiKeyRequest,
    CreateApiKeyResponse,
    GetApiKeyResponse,
    RotateApiKeyRequest,
    RotateApiKeyResponse,
)
from capella_cli.models.backup_schedule import (
    BackupScheduleRequest,
    BackupScheduleState,
    GetBackupScheduleResponse,
    WeeklySchedule,
)
from capella_cli.models.common import CouchbaseAuditData, CreatedResponse

__all__ = [
    "AllowListState",
    "ApiKeyResourceItem",
    "ApiKeyState",
    "BackupScheduleRequest",
    "BackupScheduleState",
    "CouchbaseAuditData",
    "CreateAllowListRequest",
    "CreateApiKeyRequest",
    "CreateApiKeyResponse",
    "CreatedResponse",
    "GetAllowListResponse",
    "GetApiKeyResponse",
    "GetBackupScheduleResponse",
    "RotateApiKeyRequest",
    "RotateApiKeyResponse",
    "WeeklySchedule",
]
