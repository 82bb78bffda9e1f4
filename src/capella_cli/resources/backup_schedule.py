"""Bucket backup schedule call site.

A bucket has at most one schedule, addressed by its parent ids only.
"""

from __future__ import annotations

from capella_cli.client.context import CallContext
from capella_cli.client.errors import CapellaError, ValidationError, check_not_found, parse_error
from capella_cli.models.backup_schedule import (
    BackupScheduleRequest,
    BackupScheduleState,
    GetBackupScheduleResponse,
)
from capella_cli.resources.base import CapellaResource, OperationResult, decode
from capella_cli.resources.ids import (
    BUCKET_ID,
    CLUSTER_ID,
    ORGANIZATION_ID,
    PROJECT_ID,
    parse_composite_id,
    validate_ids,
)

ERROR_AFTER_CREATION = (
    "Backup schedule creation is successful, but encountered an error while checking the"
    " current state of the schedule. Refresh in 1-2 minutes to read the current state,"
    " unexpected error: "
)

_KEYS = [ORGANIZATION_ID, PROJECT_ID, CLUSTER_ID, BUCKET_ID]


def _ids(state: BackupScheduleState) -> dict[str, str]:
    return validate_ids(
        {
            ORGANIZATION_ID: state.organization_id,
            PROJECT_ID: state.project_id,
            CLUSTER_ID: state.cluster_id,
            BUCKET_ID: state.bucket_id,
        },
        import_key=BUCKET_ID,
    )


class BackupScheduleResource(CapellaResource[BackupScheduleState]):
    def _path(self, ids: dict[str, str]) -> str:
        return (
            f"organizations/{ids[ORGANIZATION_ID]}/projects/{ids[PROJECT_ID]}"
            f"/clusters/{ids[CLUSTER_ID]}/buckets/{ids[BUCKET_ID]}/backup/schedules"
        )

    def retrieve(
        self, ctx: CallContext, ids: dict[str, str], day_of_week: str | None = None,
    ) -> BackupScheduleState:
        """Fetch the schedule; keep *day_of_week*'s casing when it matches."""
        outcome = self.execute(ctx, self._path(ids), "GET", 200)
        resp = decode(outcome, GetBackupScheduleResponse)
        if day_of_week and day_of_week.lower() == resp.weekly_schedule.day_of_week.lower():
            resp.weekly_schedule.day_of_week = day_of_week
        return BackupScheduleState.from_response(
            resp, ids[ORGANIZATION_ID], ids[PROJECT_ID], ids[CLUSTER_ID], ids[BUCKET_ID],
        )

    @staticmethod
    def _day(state: BackupScheduleState) -> str | None:
        return state.weekly_schedule.day_of_week if state.weekly_schedule else None

    def create(self, ctx: CallContext, plan: BackupScheduleState) -> OperationResult[BackupScheduleState]:
        result: OperationResult[BackupScheduleState] = OperationResult()
        parents = {key: getattr(plan, key) for key in _KEYS}
        missing = [key for key, value in parents.items() if not value]
        if missing:
            return result.error("Error parsing create backup schedule request", f"{missing[0]} cannot be empty")
        if plan.weekly_schedule is None:
            return result.error("Error parsing create backup schedule request", "weekly_schedule cannot be empty")
        ids = {key: str(value) for key, value in parents.items()}

        request = BackupScheduleRequest(type=plan.type, weekly_schedule=plan.weekly_schedule)
        try:
            self.execute(ctx, self._path(ids), "POST", 202, request)
        except CapellaError as exc:
            return result.error("Error executing request", f"Could not create backup schedule: {parse_error(exc)}")

        result.state = plan
        try:
            result.state = self.retrieve(ctx, ids, self._day(plan))
        except CapellaError as exc:
            result.diagnostics.add_warning(
                "Error reading backup schedule",
                f"Could not read backup schedule for bucket {ids[BUCKET_ID]}. "
                + ERROR_AFTER_CREATION + parse_error(exc),
            )
        return result

    def read(self, ctx: CallContext, state: BackupScheduleState) -> OperationResult[BackupScheduleState]:
        result: OperationResult[BackupScheduleState] = OperationResult()
        try:
            ids = _ids(state)
        except ValidationError as exc:
            return result.error(
                "Error reading backup schedule", f"Could not read backup schedule for bucket {state.bucket_id}: {exc}",
            )
        try:
            result.state = self.retrieve(ctx, ids, self._day(state))
        except CapellaError as exc:
            not_found, detail = check_not_found(exc)
            if not_found:
                return result.remove()
            return result.error(
                "Error reading backup schedule",
                f"Could not read backup schedule for bucket {ids[BUCKET_ID]}: {detail}",
            )
        return result

    def update(
        self, ctx: CallContext, plan: BackupScheduleState, state: BackupScheduleState,
    ) -> OperationResult[BackupScheduleState]:
        result: OperationResult[BackupScheduleState] = OperationResult()
        try:
            ids = _ids(plan)
        except ValidationError as exc:
            return result.error(
                "Error updating backup schedule",
                f"Could not update backup schedule for bucket {plan.bucket_id}: {exc}",
            )
        if plan.weekly_schedule is None:
            return result.error("Error updating backup schedule", "weekly_schedule cannot be empty")

        request = BackupScheduleRequest(type=plan.type, weekly_schedule=plan.weekly_schedule)
        try:
            self.execute(ctx, self._path(ids), "PUT", 204, request)
        except CapellaError as exc:
            return result.error(
                "Error updating backup schedule",
                f"Could not update backup schedule for bucket {ids[BUCKET_ID]}: {parse_error(exc)}",
            )

        try:
            result.state = self.retrieve(ctx, ids, self._day(plan))
        except CapellaError as exc:
            not_found, detail = check_not_found(exc)
            if not_found:
                return result.remove()
            return result.error(
                "Error reading backup schedule",
                f"Could not read backup schedule for bucket {ids[BUCKET_ID]}: {detail}",
            )
        return result

    def delete(self, ctx: CallContext, state: BackupScheduleState) -> OperationResult[BackupScheduleState]:
        result: OperationResult[BackupScheduleState] = OperationResult()
        try:
            ids = _ids(state)
        except ValidationError as exc:
            return result.error(
                "Error deleting backup schedule",
                f"Could not delete backup schedule with bucket id {state.bucket_id}: {exc}",
            )
        try:
            self.execute(ctx, self._path(ids), "DELETE", 202)
        except CapellaError as exc:
            not_found, detail = check_not_found(exc)
            if not_found:
                return result.remove()
            return result.error(
                "Error deleting backup schedule",
                f"Could not delete backup schedule with bucket id {ids[BUCKET_ID]}, unexpected error: {detail}",
            )
        result.removed = True
        return result

    def import_state(self, ctx: CallContext, import_id: str) -> OperationResult[BackupScheduleState]:
        """Adopt a schedule from ``organization_id=..,project_id=..,cluster_id=..,bucket_id=..``."""
        try:
            ids = parse_composite_id(import_id, _KEYS)
        except ValidationError as exc:
            return OperationResult().error("Error importing backup schedule", str(exc))
        return self.read(ctx, BackupScheduleState(**ids))
