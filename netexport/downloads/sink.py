"""In-memory download sink handing out revocable blob handles."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List

from netexport.export.exceptions import ResourceCreationError
from netexport.export.interfaces import DownloadSink

HANDLE_PREFIX = 'blob:'


@dataclass
class StoredDownload:
    data: bytes
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InMemoryDownloadSink(DownloadSink):
    """Keeps dump bytes in memory until their handle is revoked."""

    def __init__(self, max_bytes: int = 64 * 1024 * 1024):
        self.max_bytes = max_bytes
        self._downloads: Dict[str, StoredDownload] = {}
        self.revoked_count = 0

    def create_handle(self, text: str) -> str:
        data = text.encode('utf-8')
        if len(data) > self.max_bytes:
            raise ResourceCreationError(f'Dump is {len(data)} bytes, larger than the {self.max_bytes} byte limit')

        handle = f'{HANDLE_PREFIX}{uuid.uuid4().hex}'
        self._downloads[handle] = StoredDownload(data=data)
        return handle

    def revoke(self, handle: str) -> None:
        """Free the bytes behind `handle`. Raises KeyError for unknown or revoked handles."""
        del self._downloads[handle]
        self.revoked_count += 1

    def open(self, handle: str) -> bytes:
        """Return the stored dump bytes. Raises KeyError for unknown or revoked handles."""
        return self._downloads[handle].data

    def live_handles(self) -> List[str]:
        return list(self._downloads)

    @staticmethod
    def handle_id(handle: str) -> str:
        return handle[len(HANDLE_PREFIX):] if handle.startswith(HANDLE_PREFIX) else handle

    @staticmethod
    def handle_for_id(handle_id: str) -> str:
        return f'{HANDLE_PREFIX}{handle_id}'
