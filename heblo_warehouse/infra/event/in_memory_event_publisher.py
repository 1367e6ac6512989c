"""인메모리 도메인 이벤트 발행자 구현체."""

import logging
import threading
from collections import defaultdict
from collections.abc import Callable

from heblo_warehouse.domain.events.transport_events import DomainEvent
from heblo_warehouse.usecase.ports.event_publisher import EventPublisher

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class InMemoryEventPublisher(EventPublisher):
    """EventPublisher의 인메모리 구현체.

    이벤트를 동기적으로 핸들러에 전달한다.
    상위 타입(예: DomainEvent)을 구독한 핸들러도 하위 이벤트를 받는다.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: dict[
            type[DomainEvent], list[EventHandler]
        ] = defaultdict(list)

    def publish(self, event: DomainEvent) -> None:
        """도메인 이벤트를 발행한다.

        개별 핸들러의 예외는 로깅만 하고 다른 핸들러 실행은 계속한다.
        """
        handlers = self._handlers_for(type(event))
        logger.debug(
            'Publishing event: %s (handlers=%d)',
            type(event).__name__, len(handlers),
        )

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    'Error in event handler for %s', type(event).__name__
                )

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: EventHandler,
    ) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)
        logger.debug('Subscribed to event: %s', event_type.__name__)

    def _handlers_for(
        self, event_type: type[DomainEvent]
    ) -> list[EventHandler]:
        with self._lock:
            return [
                handler
                for klass in event_type.__mro__
                for handler in self._handlers.get(klass, [])
            ]
