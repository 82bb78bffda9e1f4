"""Integration tests for allowlist and backup-schedule commands."""

from __future__ import annotations

import json

import httpx
import respx
from typer.testing import CliRunner

from capella_cli.app import app

runner = CliRunner()
HOST = "https://capella.test"
CLUSTER = f"{HOST}/v4/organizations/org-1/projects/proj-1/clusters/cl-1"
CIDRS = f"{CLUSTER}/allowedcidrs"
SCHEDULE = f"{CLUSTER}/buckets/b-1/backup/schedules"
PARENTS = ["--org", "org-1", "--project", "proj-1", "--cluster", "cl-1"]


class TestAllowListCommands:
    @respx.mock
    def test_list(self, cli_opts, allowlist_payload, make_page):
        route = respx.get(CIDRS).mock(return_value=httpx.Response(200, json=make_page([allowlist_payload])))
        result = runner.invoke(app, ["allowlist", "list", *PARENTS, "--sort-by", "id", *cli_opts])
        assert result.exit_code == 0
        assert "10.1.0.0/16" in result.output
        assert route.calls.last.request.url.params["sortBy"] == "id"

    @respx.mock
    def test_create(self, cli_opts, allowlist_payload):
        post = respx.post(CIDRS).mock(return_value=httpx.Response(201, json={"id": "cidr-1"}))
        respx.get(f"{CIDRS}/cidr-1").mock(return_value=httpx.Response(200, json=allowlist_payload))
        result = runner.invoke(app, [
            "allowlist", "create", *PARENTS, "--cidr", "10.1.0.0/16",
            "--expires-at", "2030-01-01T00:00:00Z", *cli_opts,
        ])
        assert result.exit_code == 0
        assert "cidr-1" in result.output
        assert json.loads(post.calls.last.request.content)["expiresAt"] == "2030-01-01T00:00:00Z"

    @respx.mock
    def test_show_missing(self, cli_opts):
        respx.get(f"{CIDRS}/cidr-1").mock(return_value=httpx.Response(404))
        result = runner.invoke(app, ["allowlist", "show", "cidr-1", *PARENTS, *cli_opts])
        assert result.exit_code == 4

    @respx.mock
    def test_delete(self, cli_opts):
        route = respx.delete(f"{CIDRS}/cidr-1").mock(return_value=httpx.Response(204))
        result = runner.invoke(app, ["allowlist", "delete", "cidr-1", *PARENTS, *cli_opts])
        assert result.exit_code == 0
        assert route.call_count == 1

    @respx.mock
    def test_import(self, cli_opts, allowlist_payload):
        respx.get(f"{CIDRS}/cidr-1").mock(return_value=httpx.Response(200, json=allowlist_payload))
        result = runner.invoke(app, [
            "allowlist", "import", "id=cidr-1,cluster_id=cl-1,project_id=proj-1,organization_id=org-1",
            *cli_opts,
        ])
        assert result.exit_code == 0
        assert '"cluster_id": "cl-1"' in result.output


class TestBackupScheduleCommands:
    SCHEDULE_OPTS = [
        "--bucket", "b-1", "--day", "Sunday", "--start-at", "10",
        "--incremental-every", "4", "--retention", "90days",
    ]

    @respx.mock
    def test_show(self, cli_opts, schedule_payload):
        respx.get(SCHEDULE).mock(return_value=httpx.Response(200, json=schedule_payload))
        result = runner.invoke(app, ["backup-schedule", "show", *PARENTS, "--bucket", "b-1", *cli_opts])
        assert result.exit_code == 0
        assert "90days" in result.output

    @respx.mock
    def test_show_missing(self, cli_opts):
        respx.get(SCHEDULE).mock(return_value=httpx.Response(404))
        result = runner.invoke(app, ["backup-schedule", "show", *PARENTS, "--bucket", "b-1", *cli_opts])
        assert result.exit_code == 4
        assert "no backup schedule" in result.output

    @respx.mock
    def test_create(self, cli_opts, schedule_payload):
        post = respx.post(SCHEDULE).mock(return_value=httpx.Response(202))
        respx.get(SCHEDULE).mock(return_value=httpx.Response(200, json=schedule_payload))
        result = runner.invoke(app, [
            "backup-schedule", "create", *PARENTS, *self.SCHEDULE_OPTS, "-f", "json", *cli_opts,
        ])
        assert result.exit_code == 0
        assert '"day_of_week": "Sunday"' in result.output
        body = json.loads(post.calls.last.request.content)
        assert body["weeklySchedule"]["costOptimizedRetention"] is False

    def test_create_bad_hour(self, cli_opts):
        result = runner.invoke(app, [
            "backup-schedule", "create", *PARENTS, "--bucket", "b-1", "--day", "Sunday",
            "--start-at", "24", "--incremental-every", "4", "--retention", "90days", *cli_opts,
        ])
        assert result.exit_code != 0

    @respx.mock
    def test_update(self, cli_opts, schedule_payload):
        put = respx.put(SCHEDULE).mock(return_value=httpx.Response(204))
        respx.get(SCHEDULE).mock(return_value=httpx.Response(200, json=schedule_payload))
        result = runner.invoke(app, [
            "backup-schedule", "update", *PARENTS, *self.SCHEDULE_OPTS, "--cost-optimized", *cli_opts,
        ])
        assert result.exit_code == 0
        assert json.loads(put.calls.last.request.content)["weeklySchedule"]["costOptimizedRetention"] is True

    @respx.mock
    def test_delete(self, cli_opts):
        respx.delete(SCHEDULE).mock(return_value=httpx.Response(202))
        result = runner.invoke(app, ["backup-schedule", "delete", *PARENTS, "--bucket", "b-1", *cli_opts])
        assert result.exit_code == 0
        assert "deleted" in result.output
