"""Collaborator contracts the export controller depends on."""

from abc import ABC, abstractmethod
from typing import Any, Callable

DumpCallback = Callable[[str], None]
ErrorCallback = Callable[[Exception], None]


class DumpBuilder(ABC):
    """Produces dump text, either immediately or after collecting live data."""

    @abstractmethod
    def update_dump(self, comments: str, cached_dump: Any, strip_sensitive: bool) -> str:
        """Return updated dump text for a previously loaded dump.

        Must not suspend. Raises DumpBuildError when the dump cannot be updated.
        """
        pass

    @abstractmethod
    def build_dump_async(self, comments: str, strip_sensitive: bool, on_done: DumpCallback, on_error: ErrorCallback) -> None:
        """Start collecting live data and return without waiting.

        Exactly one of `on_done(text)` or `on_error(exc)` is invoked, once,
        at some later point.
        """
        pass


class StrippingPolicy(ABC):
    """Process-wide flag controlling removal of sensitive fields."""

    @abstractmethod
    def get(self) -> bool:
        pass

    @abstractmethod
    def set(self, enabled: bool) -> None:
        pass


class DownloadSink(ABC):
    """Turns dump text into revocable download handles."""

    @abstractmethod
    def create_handle(self, text: str) -> str:
        """Create a handle for `text`. Raises ResourceCreationError on failure."""
        pass

    @abstractmethod
    def revoke(self, handle: str) -> None:
        """Release `handle`. Must be called exactly once per created handle."""
        pass
