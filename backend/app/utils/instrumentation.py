"""
Server-side event logging helper.

Events are emitted as structured log records (``event_logged`` with the event
fields in ``extra``); there is no local event store.
"""
import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


def log_event(
    event_name: str,
    properties: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> None:
    """
    Emit one structured event log line.

    Args:
        event_name: Name of the event (e.g., "photo_uploaded", "bookshelf_analyzed")
        properties: Optional dict of event properties
        request_id: Optional request ID for correlating events

    Never raises; instrumentation must not break the request path.
    """
    try:
        logger.info(
            "event_logged",
            extra={
                "event_name": event_name,
                "request_id": request_id,
                "properties": properties or {},
            },
        )
    except Exception as e:
        logger.warning("Failed to log event: event_name=%s, error=%s", event_name, str(e))
