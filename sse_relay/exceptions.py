"""
Exceptions raised by the relay core.

Every failure is scoped to a single request or stream; endpoints translate
these into HTTP status codes.
"""


class RelayError(Exception):
    """Base class for relay errors."""

    pass


class InvalidMessageError(RelayError):
    """
    Dispatch body could not be parsed.

    Raised when a POST body is not JSON or lacks the `message`/`to` fields.
    """

    pass


class TargetNotFoundError(RelayError):
    """
    No live stream is registered for the target client id.

    This is an expected outcome: the target never connected, already
    disconnected, or the id is wrong.
    """

    def __init__(self, client_id: str):
        super().__init__(f"No stream registered for client {client_id}")
        self.client_id = client_id


class StreamClosedError(RelayError):
    """Write or flush attempted on a stream whose transport is gone."""

    pass


class DeliveryError(RelayError):
    """
    Message could not be written to the target stream.

    Raised when the target disconnects between lookup and write.
    """

    def __init__(self, client_id: str):
        super().__init__(f"Delivery to client {client_id} failed")
        self.client_id = client_id
