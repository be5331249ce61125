"""
Entrypoint for running the relay with uvicorn.

Host and port come from HOST/PORT (default 0.0.0.0:8000). Access-log lines
for LOG_EXCLUDED_PATHS are filtered out.
"""

import copy

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from sse_relay.settings import app_settings


def build_log_config() -> dict:
    """Uvicorn's default logging config with the access-log path filter."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config.setdefault("filters", {})["exclude_paths"] = {
        "()": "sse_relay.uvicorn_filters.ExcludePathsFilter"
    }
    log_config["handlers"]["access"]["filters"] = ["exclude_paths"]
    return log_config


if __name__ == "__main__":
    uvicorn.run(
        "sse_relay:app",
        host=app_settings.HOST,
        port=app_settings.PORT,
        log_config=build_log_config(),
        timeout_graceful_shutdown=app_settings.SHUTDOWN_TIMEOUT_SECONDS,
    )
