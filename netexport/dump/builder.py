"""Dump builder backed by the live data collector."""

import asyncio
import platform
from datetime import datetime, timezone
from typing import Any, Dict, Set

from netexport import __version__
from netexport.config.log import get_logger
from netexport.dump.collector import LiveDataCollector
from netexport.dump.models import LogDump
from netexport.dump.sanitizer import SecurityStripper
from netexport.export.exceptions import DumpBuildError
from netexport.export.interfaces import DumpBuilder, DumpCallback, ErrorCallback

logger = get_logger(__name__)


class LogDumpBuilder(DumpBuilder):
    """Builds LogDump text from live data, or refreshes a loaded dump."""

    def __init__(self, collector: LiveDataCollector, stripper: SecurityStripper, poll_timeout: float = 10.0):
        self._collector = collector
        self._stripper = stripper
        self._poll_timeout = poll_timeout
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _export_constants(self, strip_sensitive: bool) -> Dict[str, Any]:
        return {
            'client': 'netexport',
            'client_version': __version__,
            'python_version': platform.python_version(),
            'export_time': datetime.now(timezone.utc).isoformat(),
            'security_stripping': strip_sensitive,
        }

    def _strip(self, dump: LogDump) -> LogDump:
        # Covers extra top-level keys carried over from a loaded dump too
        return LogDump.model_validate(self._stripper.strip(dump.model_dump(mode='json')))

    def update_dump(self, comments: str, cached_dump: Any, strip_sensitive: bool) -> str:
        """Replace the comments of a loaded dump and re-render it.

        Stripping can only remove data, so a dump saved with stripping on stays
        stripped even when the flag is now off.
        """
        try:
            dump = cached_dump if isinstance(cached_dump, LogDump) else LogDump.model_validate(cached_dump)
            constants = {**dump.constants, **self._export_constants(strip_sensitive)}
            updated = dump.model_copy(update={'user_comments': comments, 'constants': constants})
            if strip_sensitive:
                updated = self._strip(updated)
            return updated.render()
        except Exception as e:
            raise DumpBuildError(f'Could not update loaded dump: {e}') from e

    def build_dump_async(self, comments: str, strip_sensitive: bool, on_done: DumpCallback, on_error: ErrorCallback) -> None:
        """Schedule collection on the running event loop and return immediately."""
        task = asyncio.get_running_loop().create_task(self._build(comments, strip_sensitive, on_done, on_error))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _build(self, comments: str, strip_sensitive: bool, on_done: DumpCallback, on_error: ErrorCallback) -> None:
        try:
            polled_data = await self._collector.poll(self._poll_timeout)
            dump = LogDump(
                user_comments=comments,
                constants=self._export_constants(strip_sensitive),
                events=self._collector.events(),
                polled_data=polled_data,
            )
            if strip_sensitive:
                dump = self._strip(dump)
            text = dump.render()
        except DumpBuildError as e:
            on_error(e)
            return
        except Exception as e:
            logger.error(f'Live data collection failed: {e}', exc_info=True)
            on_error(DumpBuildError(f'Could not collect live data: {e}'))
            return

        on_done(text)

    async def wait_pending(self) -> None:
        """Wait until every scheduled build has reported back."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
