"""Static configuration for factscope.

Non-secret knobs (pipeline thresholds, delivery retry, server, logging) live
in a single JSON file for quick edits without touching Python. Credentials
stay in the environment and are read by client.py.
"""

import json
import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_FILENAME = "config.json"


def resolve_config_path(env_path=None, cwd=None) -> str:
    """Pick the config file: FACTSCOPE_CONFIG, then ./config.json, then the checkout."""

    if env_path:
        return env_path
    local = os.path.join(cwd or os.getcwd(), CONFIG_FILENAME)
    if os.path.exists(local):
        return local
    return os.path.join(PROJECT_ROOT, CONFIG_FILENAME)


CONFIG_PATH = resolve_config_path(os.getenv("FACTSCOPE_CONFIG"))
# Relative paths in the config (log files) resolve against its directory.
CONFIG_DIR = os.path.dirname(os.path.abspath(CONFIG_PATH))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Pipeline knobs.
# - ACCEPTANCE_THRESHOLD: minimum relevance score for the digest
# - MAX_ACCEPTED: how many accepted sources the digest shows
# - FALLBACK_RESULTS: unranked results shown when nothing is accepted
_pipeline = _CONFIG.get("pipeline", {})
ACCEPTANCE_THRESHOLD = int(_pipeline.get("acceptance_threshold", 20))
MAX_ACCEPTED = int(_pipeline.get("max_accepted", 3))
FALLBACK_RESULTS = int(_pipeline.get("fallback_results", 3))
SEARCH_RESULTS = int(_pipeline.get("search_results", 10))
QUERY_MAX_LENGTH = int(_pipeline.get("query_max_length", 100))
CLAIM_MAX_CHARS = int(_pipeline.get("claim_max_chars", 2000))
# Markup mode for replies: "markdown" or "html".
PARSE_MODE = _pipeline.get("parse_mode", "markdown")

# Outbound delivery retry policy (Bot API only).
_delivery = _CONFIG.get("delivery", {})
DELIVERY_ATTEMPTS = int(_delivery.get("attempts", 3))
DELIVERY_RETRY_DELAY = float(_delivery.get("retry_delay_seconds", 1.0))
DELIVERY_TIMEOUT = float(_delivery.get("timeout_seconds", 10.0))

# Webhook server settings used by the "serve" command.
_server = _CONFIG.get("server", {})
SERVER_HOST = _server.get("host", "0.0.0.0")
SERVER_PORT = int(_server.get("port", 8080))
WEBHOOK_PATH = _server.get("webhook_path", "/webhook")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
