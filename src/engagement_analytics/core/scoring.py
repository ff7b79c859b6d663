"""Event scoring."""

from typing import Dict, List, Mapping, Optional, Union
import structlog

from ..models.events import EventType

logger = structlog.get_logger()


def parse_event_type(value: Union[str, EventType]) -> Optional[EventType]:
    """Parse an event type string, returning None for unknown types."""
    if isinstance(value, EventType):
        return value
    try:
        return EventType(value)
    except ValueError:
        return None


class EventScorer:
    """Table driven engagement scoring."""

    def __init__(self, weights: Mapping[EventType, int]):
        """Initialize the scorer.

        Every EventType member must carry a weight so that adding a type
        without scoring it fails here rather than scoring silently as 0.
        """
        missing = [t for t in EventType if t not in weights]
        if missing:
            raise ValueError(
                f"No weight configured for event types: {', '.join(t.value for t in missing)}"
            )
        self._weights: Dict[EventType, int] = {t: weights[t] for t in EventType}

    @property
    def allowed_types(self) -> List[EventType]:
        """The upstream type allow-list."""
        return list(self._weights)

    def is_allowed(self, event_type: Union[str, EventType]) -> bool:
        return parse_event_type(event_type) is not None

    def score(self, event_type: Union[str, EventType]) -> int:
        """Engagement score for an event type; unknown types score 0."""
        parsed = parse_event_type(event_type)
        if parsed is None:
            logger.debug("Unknown event type scored as 0", event_type=str(event_type))
            return 0
        return self._weights[parsed]
