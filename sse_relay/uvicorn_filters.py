"""Custom filters for uvicorn access logging."""

import logging

from sse_relay.settings import app_settings


class ExcludePathsFilter(logging.Filter):
    """
    Logging filter to drop access-log lines for monitoring endpoints.

    Health checks and Prometheus scrapes would otherwise drown out the
    stream and dispatch requests. The excluded paths come from the
    LOG_EXCLUDED_PATHS setting.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        # uvicorn access records carry (client, method, path, version, status)
        if isinstance(record.args, tuple) and len(record.args) >= 3:
            path = str(record.args[2]).split("?", 1)[0]
            return path not in app_settings.LOG_EXCLUDED_PATHS

        message = record.getMessage()
        return not any(
            f" {path} " in message for path in app_settings.LOG_EXCLUDED_PATHS
        )
