"""
Protocol constants for the event stream.

These values define the wire contract with browsers and senders and are not
configurable. For configurable values (port, log level, Loki), see
sse_relay/settings.py.
"""

# ============================================================================
# Client identity
# ============================================================================

# Cookie carrying the client identity between reconnects
CLIENT_ID_COOKIE_NAME = "sse_client_id"

# Lifetime (seconds) of the identity cookie, refreshed on every attach
CLIENT_ID_COOKIE_MAX_AGE_SECONDS = 24 * 60 * 60

CLIENT_ID_COOKIE_PATH = "/"


# ============================================================================
# Event stream framing
# ============================================================================

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"

EVENT_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    # Disable nginx/Traefik response buffering
    "X-Accel-Buffering": "no",
}

WELCOME_TEMPLATE = "Welcome to the event stream - {client_id}\n"

LINE_SEPARATOR = "\n"

# HTTP versions that can carry an open-ended chunked response
STREAMING_HTTP_VERSIONS = frozenset({"1.1", "2", "3"})
