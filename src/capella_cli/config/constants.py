"""Default paths, environment variable names, and constants."""

from __future__ import annotations

import platformdirs

APP_NAME = "capella-cli"
APP_AUTHOR = "Couchbase"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME, APP_AUTHOR)
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Environment variable names
ENV_HOST = "CAPELLA_HOST"
ENV_API_TOKEN = "CAPELLA_AUTHENTICATION_TOKEN"
ENV_PROFILE = "CAPELLA_PROFILE"

# API defaults
DEFAULT_HOST = "https://cloudapi.cloud.couchbase.com"
DEFAULT_TIMEOUT = 60.0

# Retry defaults
DEFAULT_MAX_ATTEMPTS = 4
DEFAULT_BASE_DELAY = 1.0
DEFAULT_BACKOFF_MULTIPLIER = 2.0
DEFAULT_MAX_DELAY = 30.0
DEFAULT_JITTER = 0.1

# Pagination defaults
DEFAULT_PER_PAGE = 25
DEFAULT_MAX_PAGES = 1000
