"""Integration tests for apikey commands."""

from __future__ import annotations

import httpx
import respx
from typer.testing import CliRunner

from capella_cli.app import app

runner = CliRunner()
HOST = "https://capella.test"
KEYS = f"{HOST}/v4/organizations/org-1/apikeys"


class TestApiKeyCommands:
    @respx.mock
    def test_list(self, cli_opts, api_key_payload, make_page):
        respx.get(KEYS).mock(return_value=httpx.Response(200, json=make_page([api_key_payload])))
        result = runner.invoke(app, ["apikey", "list", "--org", "org-1", *cli_opts])
        assert result.exit_code == 0
        assert "ci-key" in result.output

    @respx.mock
    def test_list_json(self, cli_opts, api_key_payload, make_page):
        respx.get(KEYS).mock(return_value=httpx.Response(200, json=make_page([api_key_payload])))
        result = runner.invoke(app, ["apikey", "list", "--org", "org-1", "-f", "json", *cli_opts])
        assert result.exit_code == 0
        assert '"organization_roles"' in result.output

    @respx.mock
    def test_show(self, cli_opts, api_key_payload):
        respx.get(f"{KEYS}/key-1").mock(return_value=httpx.Response(200, json=api_key_payload))
        result = runner.invoke(app, ["apikey", "show", "key-1", "--org", "org-1", *cli_opts])
        assert result.exit_code == 0
        assert "ci-key" in result.output

    @respx.mock
    def test_show_missing(self, cli_opts):
        respx.get(f"{KEYS}/key-1").mock(return_value=httpx.Response(404))
        result = runner.invoke(app, ["apikey", "show", "key-1", "--org", "org-1", *cli_opts])
        assert result.exit_code == 4
        assert "does not exist" in result.output

    @respx.mock
    def test_create_warns_when_refresh_fails(self, cli_opts):
        respx.post(KEYS).mock(return_value=httpx.Response(201, json={"id": "key-1", "token": "tok-1"}))
        respx.get(f"{KEYS}/key-1").mock(return_value=httpx.Response(404))
        result = runner.invoke(app, [
            "apikey", "create", "--org", "org-1", "--name", "ci-key",
            "--role", "organizationMember", "-f", "json", *cli_opts,
        ])
        assert result.exit_code == 0
        assert "Warning" in result.output
        assert "tok-1" in result.output

    @respx.mock
    def test_create_rejected(self, cli_opts):
        respx.post(KEYS).mock(return_value=httpx.Response(422, json={"message": "unknown role"}))
        result = runner.invoke(app, [
            "apikey", "create", "--org", "org-1", "--name", "ci-key", "--role", "nope", *cli_opts,
        ])
        assert result.exit_code == 1
        assert "unknown role" in result.output

    def test_create_bad_resources_json(self, cli_opts):
        result = runner.invoke(app, [
            "apikey", "create", "--org", "org-1", "--name", "k", "--role", "r",
            "--resources", "{not json", *cli_opts,
        ])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    @respx.mock
    def test_rotate(self, cli_opts, api_key_payload):
        respx.post(f"{KEYS}/key-1/rotate").mock(return_value=httpx.Response(201, json={"secretKey": "s2"}))
        respx.get(f"{KEYS}/key-1").mock(return_value=httpx.Response(200, json=api_key_payload))
        result = runner.invoke(app, [
            "apikey", "rotate", "key-1", "--org", "org-1", "--rotate", "2", "--last-rotate", "1",
            "-f", "json", *cli_opts,
        ])
        assert result.exit_code == 0
        assert '"secret": "s2"' in result.output

    def test_rotate_counter_must_grow(self, cli_opts):
        result = runner.invoke(app, [
            "apikey", "rotate", "key-1", "--org", "org-1", "--rotate", "1", "--last-rotate", "1", *cli_opts,
        ])
        assert result.exit_code == 1

    @respx.mock
    def test_delete_missing_succeeds(self, cli_opts):
        respx.delete(f"{KEYS}/key-1").mock(return_value=httpx.Response(404))
        result = runner.invoke(app, ["apikey", "delete", "key-1", "--org", "org-1", *cli_opts])
        assert result.exit_code == 0
        assert "deleted" in result.output

    def test_import_bad_id(self, cli_opts):
        result = runner.invoke(app, ["apikey", "import", "key-1", *cli_opts])
        assert result.exit_code == 1
        assert "invalid import id" in result.output

    def test_no_token(self):
        result = runner.invoke(app, ["apikey", "list", "--org", "org-1"])
        assert result.exit_code == 6
        assert "No API token configured" in result.output

    @respx.mock
    def test_token_from_env(self, monkeypatch, make_page):
        monkeypatch.setenv("CAPELLA_HOST", HOST)
        monkeypatch.setenv("CAPELLA_AUTHENTICATION_TOKEN", "env-token")
        route = respx.get(KEYS).mock(return_value=httpx.Response(200, json=make_page([])))
        result = runner.invoke(app, ["apikey", "list", "--org", "org-1"])
        assert result.exit_code == 0
        assert route.calls.last.request.headers["Authorization"] == "Bearer env-token"

    @respx.mock
    def test_auth_failure_exit_code(self, cli_opts):
        respx.get(KEYS).mock(return_value=httpx.Response(401, json={"message": "bad token"}))
        result = runner.invoke(app, ["apikey", "list", "--org", "org-1", *cli_opts])
        assert result.exit_code == 3
        assert "failed to execute request" in result.output
