"""E2E test configuration for a live Capella organization."""

from __future__ import annotations

import os

import pytest


@pytest.fixture
def live_opts(request) -> list[str]:
    host = request.config.getoption("--host-url")
    token = request.config.getoption("--api-token")
    if not host or not token:
        pytest.skip("Live Capella credentials not provided")
    return ["--host", host, "--token", token]


@pytest.fixture
def org_id() -> str:
    org = os.environ.get("CAPELLA_E2E_ORGANIZATION_ID")
    if not org:
        pytest.skip("CAPELLA_E2E_ORGANIZATION_ID not set")
    return org
