"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from capella_cli.client.context import CallContext
from capella_cli.client.executor import RetryingExecutor
from capella_cli.client.retry import RetryPolicy
from capella_cli.config.manager import ConfigManager
from capella_cli.config.models import CapellaProfile
from capella_cli.resources.base import Connection

HOST = "https://capella.test"
ORG = "ffffffff-aaaa-1414-eeee-000000000000"
PROJECT = "ffffffff-aaaa-1414-eeee-000000000001"
CLUSTER = "ffffffff-aaaa-1414-eeee-000000000002"
BUCKET = "YnVja2V0"


def pytest_addoption(parser):
    parser.addoption("--host-url", action="store", default=None)
    parser.addoption("--api-token", action="store", default=None)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real config file and CAPELLA_* variables."""
    config_file = tmp_path / "capella" / "config.toml"
    monkeypatch.setattr("capella_cli.config.manager.CONFIG_FILE", config_file)
    for var in ("CAPELLA_HOST", "CAPELLA_AUTHENTICATION_TOKEN", "CAPELLA_PROFILE"):
        monkeypatch.delenv(var, raising=False)
    return config_file


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def config_manager(tmp_config: Path) -> ConfigManager:
    """Return a ConfigManager pointed at a temp config file."""
    return ConfigManager(config_path=tmp_config)


@pytest.fixture
def sample_profile() -> CapellaProfile:
    return CapellaProfile(name="test", host_url=HOST, token="test-token")


@pytest.fixture
def fast_policy() -> RetryPolicy:
    """Three attempts with small, jitter-free delays."""
    return RetryPolicy(max_attempts=3, base_delay=0.01, multiplier=2, max_delay=0.05, jitter=0)


class RecordingSleep:
    """Sleeper that records requested delays instead of blocking."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, ctx: CallContext, seconds: float) -> None:
        ctx.check()
        self.delays.append(seconds)


@pytest.fixture
def sleeps() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def executor(fast_policy: RetryPolicy, sleeps: RecordingSleep):
    ex = RetryingExecutor(policy=fast_policy, sleep=sleeps, rand=lambda: 0.0)
    yield ex
    ex.close()


@pytest.fixture
def conn(executor: RetryingExecutor) -> Connection:
    return Connection(executor=executor, host_url=HOST, token="test-token")


@pytest.fixture
def ctx() -> CallContext:
    return CallContext()


@pytest.fixture
def cli_opts() -> list[str]:
    return ["--host", HOST, "--token", "test-token"]


@pytest.fixture
def api_key_payload() -> dict:
    """Sample GET /organizations/{org}/apikeys/{id} response."""
    return {
        "id": "key-1",
        "name": "ci-key",
        "description": "used by CI",
        "expiry": 180,
        "allowedCIDRs": ["10.0.0.0/8"],
        "organizationRoles": ["organizationMember"],
        "resources": [
            {"id": PROJECT, "type": "project", "roles": ["projectViewer"]},
        ],
        "audit": {
            "createdBy": "user-1",
            "createdAt": "2024-01-01T00:00:00Z",
            "modifiedBy": "user-1",
            "modifiedAt": "2024-01-01T00:00:00Z",
            "version": 1,
        },
    }


@pytest.fixture
def allowlist_payload() -> dict:
    return {
        "id": "cidr-1",
        "cidr": "10.1.0.0/16",
        "comment": "office",
        "expiresAt": "2030-01-01T00:00:00Z",
    }


@pytest.fixture
def schedule_payload() -> dict:
    return {
        "type": "weekly",
        "weeklySchedule": {
            "dayOfWeek": "sunday",
            "startAt": 10,
            "incrementalEvery": 4,
            "retentionTime": "90days",
            "costOptimizedRetention": False,
        },
    }


@pytest.fixture
def make_page():
    """Build one paginated envelope."""

    def _page(data: list, next_page: int = 0, current: int = 1, last: int = 1) -> dict:
        return {
            "data": data,
            "cursor": {
                "hrefs": {"first": "", "last": "", "previous": "", "next": ""},
                "pages": {
                    "page": current,
                    "next": next_page,
                    "previous": max(current - 1, 0),
                    "last": last,
                    "perPage": 25,
                    "totalItems": len(data),
                },
            },
        }

    return _page
