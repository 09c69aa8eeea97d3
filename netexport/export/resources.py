from typing import Optional

from netexport.config.log import get_logger
from netexport.export.interfaces import DownloadSink

logger = get_logger(__name__)


class ResourceSlot:
    """Holds at most one live download handle."""

    def __init__(self, sink: DownloadSink):
        self._sink = sink
        self._handle: Optional[str] = None

    @property
    def handle(self) -> Optional[str]:
        return self._handle

    def release(self) -> None:
        """Revoke the held handle, if any."""
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        self._sink.revoke(handle)
        logger.debug('Revoked download handle', handle=handle)

    def replace_resource(self, text: str) -> str:
        """Revoke the previous handle and store a new one created from `text`.

        If creation fails the slot is left empty and the error propagates.
        """
        self.release()
        self._handle = self._sink.create_handle(text)
        logger.debug('Created download handle', handle=self._handle, size=len(text))
        return self._handle
