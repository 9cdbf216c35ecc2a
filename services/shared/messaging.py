"""Domain events of the panel, appended to a Redis Stream.

Downstream workers (mailer, WhatsApp gateway) read ``panel-events``. Each
entry is a flat map of strings::

    event_id     uuid4 hex
    event_type   e.g. ``account_request.approved``
    source       service that emitted it
    occurred_at  ISO-8601 UTC
    payload      JSON document
    metadata     JSON document, only when given
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import redis

logger = logging.getLogger(__name__)


class EventPublisher:
    """Publish domain events to a Redis Stream.

    The panel never waits on consumers, so a failed ``XADD`` is logged and
    the request carries on.
    """

    def __init__(
        self,
        redis_url: str,
        stream_name: str,
        *,
        source: str = "panel",
        maxlen: Optional[int] = 1000,
    ) -> None:
        self._stream_name = stream_name
        self._source = source
        self._maxlen = maxlen
        self._client = redis.Redis.from_url(redis_url)

    @property
    def stream_name(self) -> str:
        return self._stream_name

    def build_entry(
        self,
        event_type: str,
        payload: Dict[str, Any],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, str]:
        entry = {
            "event_id": uuid.uuid4().hex,
            "event_type": event_type,
            "source": self._source,
            "occurred_at": datetime.now(timezone.utc).isoformat(),
            "payload": json.dumps(payload, default=str),
        }
        if metadata:
            entry["metadata"] = json.dumps(metadata, default=str)
        return entry

    def publish(
        self,
        event_type: str,
        payload: Dict[str, Any],
        *,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[str]:
        """Append one event; returns the stream id, or None when Redis failed."""
        entry = self.build_entry(event_type, payload, metadata)
        try:
            stream_id = self._client.xadd(
                self._stream_name,
                entry,
                maxlen=self._maxlen,
                approximate=self._maxlen is not None,
            )
        except redis.RedisError:
            logger.exception("Failed to publish event '%s' to stream '%s'", event_type, self._stream_name)
            return None
        return stream_id.decode() if isinstance(stream_id, bytes) else stream_id

    def close(self) -> None:
        self._client.close()


def create_event_publisher(
    redis_url: Optional[str],
    stream_name: str,
    *,
    source: str = "panel",
) -> Optional[EventPublisher]:
    """Return a publisher, or None when Redis is not configured."""
    if not isinstance(redis_url, str) or not redis_url.strip():
        return None
    return EventPublisher(redis_url, stream_name, source=source)
