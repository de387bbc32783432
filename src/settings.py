"""Static configuration for matchdeck.

All user-editable settings (server, refresh, layout, logging) live in a
single JSON file for quick edits without touching Python. A missing file
means built-in defaults.
"""

import json
import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        return {}

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        loaded = json.load(handle)
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be an object: {CONFIG_PATH}")
    return loaded


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Local listener the browser producer posts to.
_server = _CONFIG.get("server", {})
SERVER_HOST = _server.get("host", "127.0.0.1")
SERVER_PORT = int(_server.get("port", 8080))

# Refresh loop controls.
# - REFRESH_INTERVAL_SECONDS: pause between cycles
# - FETCH_TIMEOUT_SECONDS: deadline for a single match document
# - MAX_CONCURRENCY: 0 fetches every match at once
_refresh = _CONFIG.get("refresh", {})
REFRESH_ENABLED = bool(_refresh.get("enabled", True))
REFRESH_INTERVAL_SECONDS = float(_refresh.get("interval_seconds", 20))
FETCH_TIMEOUT_SECONDS = float(_refresh.get("fetch_timeout_seconds", 15))
MAX_CONCURRENCY = int(_refresh.get("max_concurrency", 0))
USER_AGENT = _refresh.get("user_agent", "")

# Display-height constants; unset keys keep the LayoutConfig defaults.
LAYOUT = _CONFIG.get("layout", {})

# Panel behavior.
_panel = _CONFIG.get("panel", {})
CLOSE_WHEN_EMPTY = bool(_panel.get("close_when_empty", False))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
