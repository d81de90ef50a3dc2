"""Event Router - Explicit handler registration and delivery

Handlers are registered per event type and invoked in registration order.
A failing handler is logged and does not stop the others. Events can be
published immediately or queued and delivered later with `drain()`.
"""
import inspect
from collections import defaultdict, deque
from typing import Any, Awaitable, Callable, Deque, Dict, List, Union

from pydantic import BaseModel, Field

from ..domain.models import Event
from ..domain.enums import EventType
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


Handler = Callable[[Event], Union[None, Awaitable[None]]]


class DeliveryReport(BaseModel):
    """Outcome of delivering one event"""
    event_type: str
    delivered: int = 0
    failed: List[str] = Field(default_factory=list)

    @property
    def handled(self) -> bool:
        return self.delivered > 0


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventRouter:
    """Routes business events to their registered handlers"""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)
        self._queue: Deque[Event] = deque()

    def register(self, event_type: Union[EventType, str], handler: Handler) -> None:
        """Register a handler (sync or async) for an event type"""
        key = EventType(event_type).value
        self._handlers[key].append(handler)
        logger.debug(f"Registered {_handler_name(handler)} for {key}")

    def handlers_for(self, event_type: Union[EventType, str]) -> List[Handler]:
        """Handlers of an event type, in registration order"""
        return list(self._handlers.get(EventType(event_type).value, []))

    @property
    def pending(self) -> int:
        """Number of queued, undelivered events"""
        return len(self._queue)

    async def publish(self, event: Event) -> DeliveryReport:
        """Deliver an event to every handler now"""
        if event.occurred_at is None:
            event = event.model_copy(update={"occurred_at": utc_now()})

        key = EventType(event.event_type).value
        report = DeliveryReport(event_type=key)
        handlers = self._handlers.get(key, [])

        if not handlers:
            logger.info(f"No handlers registered for {key}", extra={"event_type": key})
            return report

        for handler in handlers:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
                report.delivered += 1
            except Exception as e:
                name = _handler_name(handler)
                report.failed.append(name)
                logger.error(
                    f"Event handler {name} failed: {e}",
                    extra={"event_type": key},
                    exc_info=True
                )

        logger.info(
            f"Published {key} to {report.delivered}/{len(handlers)} handlers",
            extra={"event_type": key}
        )
        return report

    def enqueue(self, event: Event) -> int:
        """Queue an event for later delivery. Returns the queue length."""
        if event.occurred_at is None:
            event = event.model_copy(update={"occurred_at": utc_now()})
        self._queue.append(event)
        return len(self._queue)

    def emit(self, event_type: Union[EventType, str], payload: Dict[str, Any]) -> int:
        """Queue an event built from a type and payload"""
        return self.enqueue(Event(event_type=event_type, payload=payload))

    async def drain(self) -> List[DeliveryReport]:
        """Deliver queued events in FIFO order until the queue is empty"""
        reports = []
        while self._queue:
            reports.append(await self.publish(self._queue.popleft()))
        return reports
