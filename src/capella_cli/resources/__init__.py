"""Reconciliation call sites for Capella resources."""

from capella_cli.resources.allowlist import AllowListResource
from capella_cli.resources.apikey import ApiKeyResource
from capella_cli.resources.backup_schedule import BackupScheduleResource
from capella_cli.resources.base import Connection, Diagnostic, Diagnostics, OperationResult

__all__ = [
    "AllowListResource",
    "ApiKeyResource",
    "BackupScheduleResource",
    "Connection",
    "Diagnostic",
    "Diagnostics",
    "OperationResult",
]
