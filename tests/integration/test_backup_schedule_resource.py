"""Integration tests for the backup schedule call site."""

from __future__ import annotations

import json

import httpx
import respx

from capella_cli.models.backup_schedule import BackupScheduleState, WeeklySchedule
from capella_cli.resources.backup_schedule import ERROR_AFTER_CREATION, BackupScheduleResource
from capella_cli.resources.base import Severity

HOST = "https://capella.test"
SCHEDULE = f"{HOST}/v4/organizations/org-1/projects/proj-1/clusters/cl-1/buckets/b-1/backup/schedules"


def _plan(day: str = "Sunday") -> BackupScheduleState:
    return BackupScheduleState(
        organization_id="org-1",
        project_id="proj-1",
        cluster_id="cl-1",
        bucket_id="b-1",
        weekly_schedule=WeeklySchedule(
            day_of_week=day, start_at=10, incremental_every=4, retention_time="90days",
        ),
    )


class TestBackupScheduleResource:
    @respx.mock
    def test_create_keeps_day_casing(self, conn, ctx, schedule_payload):
        post = respx.post(SCHEDULE).mock(return_value=httpx.Response(202))
        respx.get(SCHEDULE).mock(return_value=httpx.Response(200, json=schedule_payload))

        result = BackupScheduleResource(conn).create(ctx, _plan("Sunday"))

        assert result.ok
        assert result.state.weekly_schedule.day_of_week == "Sunday"
        assert result.state.weekly_schedule.retention_time == "90days"
        sent = json.loads(post.calls.last.request.content)
        assert sent["type"] == "weekly"
        assert sent["weeklySchedule"]["startAt"] == 10

    @respx.mock
    def test_create_refresh_failure_warns(self, conn, ctx):
        respx.post(SCHEDULE).mock(return_value=httpx.Response(202))
        respx.get(SCHEDULE).mock(return_value=httpx.Response(503))

        result = BackupScheduleResource(conn).create(ctx, _plan())

        assert result.ok
        assert result.diagnostics[0].severity is Severity.WARNING
        assert ERROR_AFTER_CREATION in result.diagnostics[0].detail
        assert result.state == _plan()

    def test_create_requires_schedule(self, conn, ctx):
        plan = _plan().model_copy(update={"weekly_schedule": None})
        result = BackupScheduleResource(conn).create(ctx, plan)
        assert result.diagnostics[0].detail == "weekly_schedule cannot be empty"

    @respx.mock
    def test_read_different_day_uses_server(self, conn, ctx, schedule_payload):
        respx.get(SCHEDULE).mock(return_value=httpx.Response(200, json=schedule_payload))
        result = BackupScheduleResource(conn).read(ctx, _plan("Monday"))
        assert result.state.weekly_schedule.day_of_week == "sunday"

    @respx.mock
    def test_read_not_found_removes(self, conn, ctx):
        respx.get(SCHEDULE).mock(return_value=httpx.Response(404))
        result = BackupScheduleResource(conn).read(ctx, _plan())
        assert result.ok
        assert result.removed is True

    @respx.mock
    def test_update(self, conn, ctx, schedule_payload):
        put = respx.put(SCHEDULE).mock(return_value=httpx.Response(204))
        respx.get(SCHEDULE).mock(return_value=httpx.Response(200, json=schedule_payload))
        result = BackupScheduleResource(conn).update(ctx, _plan("SUNDAY"), _plan("monday"))
        assert result.ok
        assert result.state.weekly_schedule.day_of_week == "SUNDAY"
        assert json.loads(put.calls.last.request.content)["weeklySchedule"]["dayOfWeek"] == "SUNDAY"

    @respx.mock
    def test_update_retried_on_5xx(self, conn, ctx, schedule_payload):
        put = respx.put(SCHEDULE).mock(side_effect=[httpx.Response(502), httpx.Response(204)])
        respx.get(SCHEDULE).mock(return_value=httpx.Response(200, json=schedule_payload))
        assert BackupScheduleResource(conn).update(ctx, _plan(), _plan()).ok
        assert put.call_count == 2

    @respx.mock
    def test_delete(self, conn, ctx):
        respx.delete(SCHEDULE).mock(return_value=httpx.Response(202))
        result = BackupScheduleResource(conn).delete(ctx, _plan())
        assert result.ok
        assert result.removed is True

    @respx.mock
    def test_delete_not_found_is_success(self, conn, ctx):
        respx.delete(SCHEDULE).mock(return_value=httpx.Response(404))
        assert BackupScheduleResource(conn).delete(ctx, _plan()).ok

    @respx.mock
    def test_import(self, conn, ctx, schedule_payload):
        respx.get(SCHEDULE).mock(return_value=httpx.Response(200, json=schedule_payload))
        result = BackupScheduleResource(conn).import_state(
            ctx, "bucket_id=b-1,cluster_id=cl-1,project_id=proj-1,organization_id=org-1",
        )
        assert result.ok
        assert result.state.bucket_id == "b-1"

    def test_import_plain_id_rejected(self, conn, ctx):
        result = BackupScheduleResource(conn).import_state(ctx, "b-1")
        assert not result.ok
        assert "missing 'organization_id'" in result.diagnostics[0].detail


class TestPaddedBucketId:
    BUCKET = "dHJhdmVsLXNhbXBsZQ=="
    URL = (
        f"{HOST}/v4/organizations/org-1/projects/proj-1/clusters/cl-1"
        f"/buckets/{BUCKET}/backup/schedules"
    )

    def _state(self) -> BackupScheduleState:
        return _plan().model_copy(update={"bucket_id": self.BUCKET})

    @respx.mock
    def test_read(self, conn, ctx, schedule_payload):
        route = respx.get(self.URL).mock(return_value=httpx.Response(200, json=schedule_payload))
        result = BackupScheduleResource(conn).read(ctx, self._state())
        assert result.ok
        assert result.state.bucket_id == self.BUCKET
        assert route.call_count == 1

    @respx.mock
    def test_update(self, conn, ctx, schedule_payload):
        put = respx.put(self.URL).mock(return_value=httpx.Response(204))
        respx.get(self.URL).mock(return_value=httpx.Response(200, json=schedule_payload))
        assert BackupScheduleResource(conn).update(ctx, self._state(), self._state()).ok
        assert put.call_count == 1

    @respx.mock
    def test_delete(self, conn, ctx):
        route = respx.delete(self.URL).mock(return_value=httpx.Response(202))
        assert BackupScheduleResource(conn).delete(ctx, self._state()).ok
        assert route.call_count == 1
