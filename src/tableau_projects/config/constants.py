"""Default paths, environment variable names, and constants."""

from __future__ import annotations

import platformdirs

APP_NAME = "tableau-projects"
APP_AUTHOR = "tableau-projects"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME, APP_AUTHOR)
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Environment variable names
ENV_SERVER_URL = "TABLEAU_SERVER_URL"
ENV_AUTH_TOKEN = "TABLEAU_AUTH_TOKEN"
ENV_SITE_ID = "TABLEAU_SITE_ID"
ENV_PROFILE = "TABLEAU_PROFILE"

# API defaults
DEFAULT_API_VERSION = "3.19"
DEFAULT_TIMEOUT = 30.0

# Read-back after create: attempts and total delay budget (seconds)
DEFAULT_SETTLE_ATTEMPTS = 5
DEFAULT_SETTLE_MAX_DELAY = 10.0

# Declarative host binding
DEFAULT_STATE_FILE = "tableau-projects.state.json"
DEFAULT_DESIRED_FILE = "projects.toml"
STATE_FORMAT_VERSION = 1
