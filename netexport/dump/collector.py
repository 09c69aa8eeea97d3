"""Live diagnostic data: captured events plus on-demand pollers."""

import asyncio
from collections import deque
from typing import Any, Awaitable, Callable, Dict, List

from netexport.config.log import get_logger
from netexport.export.exceptions import DumpBuildError

logger = get_logger(__name__)

Poller = Callable[[], Awaitable[Any]]


class LiveDataCollector:
    """Keeps the most recent events and polls registered data sources."""

    def __init__(self, max_events: int = 10000):
        self._events: deque = deque(maxlen=max_events)
        self._pollers: Dict[str, Poller] = {}

    def record_event(self, event: Dict[str, Any]) -> None:
        self._events.append(dict(event))

    def events(self) -> List[Dict[str, Any]]:
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()

    def register_poller(self, name: str, poller: Poller) -> None:
        """Register an async callable whose result is stored under `name` in a dump."""
        if name in self._pollers:
            logger.warning(f'Replacing poller {name!r}')
        self._pollers[name] = poller

    def unregister_poller(self, name: str) -> None:
        self._pollers.pop(name, None)

    def poller_names(self) -> List[str]:
        return list(self._pollers)

    async def poll(self, timeout: float) -> Dict[str, Any]:
        """Run every poller concurrently and return their results keyed by name.

        Raises DumpBuildError if they do not all finish within `timeout` seconds.
        """
        if not self._pollers:
            return {}

        names = list(self._pollers)
        pending = asyncio.gather(*(self._pollers[name]() for name in names))
        try:
            results = await asyncio.wait_for(pending, timeout)
        except asyncio.TimeoutError as e:
            raise DumpBuildError(f'Timed out after {timeout}s waiting for live data') from e

        logger.debug('Polled live data', pollers=names)
        return dict(zip(names, results))
