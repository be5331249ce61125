import threading

from sse_relay.logging import logger
from sse_relay.streams import StreamSink
from sse_relay.utils.metrics import sse_connections_active


class ConnectionRegistry:
    """
    Registry of open event streams keyed by client id.

    A single lock guards the whole mapping. Critical sections only touch the
    dict; writes and flushes on a looked-up sink happen after the lock is
    released, so a target may be unregistered between lookup and write.
    """

    def __init__(self) -> None:
        self._streams: dict[str, StreamSink] = {}
        self._lock = threading.Lock()

    def register(self, client_id: str, sink: StreamSink) -> StreamSink | None:
        """
        Adds or replaces the stream registered for a client id.

        The last registration wins. A replaced sink is not closed; its
        session keeps running until its own transport goes away.

        Args:
            client_id: Identity of the client owning the stream.
            sink: The open stream to deliver messages to.

        Returns:
            The sink that was replaced, or None.
        """
        with self._lock:
            previous = self._streams.get(client_id)
            self._streams[client_id] = sink
            count = len(self._streams)

        sse_connections_active.set(count)
        if previous is not None and previous is not sink:
            logger.warning(
                f"Stream ({id(previous)}) for client {client_id} replaced "
                f"by ({id(sink)}); previous stream left open"
            )
        else:
            logger.debug(f"Stream ({id(sink)}) registered for {client_id}")
        return previous

    def unregister(self, client_id: str, sink: StreamSink | None = None) -> bool:
        """
        Removes the stream registered for a client id.

        Missing entries are ignored, disconnects may race with each other.

        Args:
            client_id: Identity whose stream should be removed.
            sink: When given, remove only if this sink is still the one
                registered, so a replaced session cannot evict its successor.

        Returns:
            True if an entry was removed.
        """
        with self._lock:
            current = self._streams.get(client_id)
            if current is None or (sink is not None and current is not sink):
                return False
            del self._streams[client_id]
            count = len(self._streams)

        sse_connections_active.set(count)
        logger.debug(f"Stream ({id(current)}) removed for {client_id}")
        return True

    def lookup(self, client_id: str) -> StreamSink | None:
        """
        Get the stream registered for a client id.

        Returns:
            The registered sink, or None if the client is not connected.
        """
        with self._lock:
            return self._streams.get(client_id)

    def client_ids(self) -> list[str]:
        """Snapshot of the currently registered client ids."""
        with self._lock:
            return list(self._streams)

    def __contains__(self, client_id: object) -> bool:
        with self._lock:
            return client_id in self._streams

    def __len__(self) -> int:
        with self._lock:
            return len(self._streams)
