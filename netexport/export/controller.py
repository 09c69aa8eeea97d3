"""Export state machine: validates, dispatches dump builds and owns the download handle."""

from functools import partial
from typing import Any, Optional

from netexport.config.log import get_logger
from netexport.export.builds import AsyncBuild, DumpBuild, SyncBuild
from netexport.export.exceptions import CommentsRequiredError
from netexport.export.interfaces import DownloadSink, DumpBuilder, StrippingPolicy
from netexport.export.resources import ResourceSlot
from netexport.export.validation import validate_comments
from netexport.export.view import ExportViewState, SaveDispatch, SaveStatus

logger = get_logger(__name__)


class ExportController:
    """Drives one save at a time from user comments to a downloadable dump.

    A save either updates a previously loaded dump synchronously or asks the
    builder to collect live data and report back through a callback. Both
    paths finish in the same completion handler, which swaps the single held
    download handle and returns the controller to idle.
    """

    PREPARING_TEXT = 'Preparing data...'
    SUCCESS_TEXT = 'Dump successful'
    FAILURE_TEXT = 'Dump failed'

    def __init__(self, builder: DumpBuilder, policy: StrippingPolicy, sink: DownloadSink):
        self._builder = builder
        self._policy = policy
        self._resources = ResourceSlot(sink)

        self._status = SaveStatus.IDLE
        # Bumped per dispatched save; callbacks from older builds are dropped
        self._generation = 0
        self._status_text = ''
        self._save_enabled = True

        self._comments = ''
        self._comments_invalid = False
        self._warning: Optional[str] = None

        # Cached copy of the last loaded dump, reused by every later save
        self._loaded_dump: Any = None

        self._stripping_locked = False
        self._privacy_warning_visible = False

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def comments(self) -> str:
        return self._comments

    @property
    def loaded_dump(self) -> Any:
        return self._loaded_dump

    @property
    def download_handle(self) -> Optional[str]:
        return self._resources.handle

    @property
    def stripping_locked(self) -> bool:
        return self._stripping_locked

    def set_user_comments(self, comments: str) -> None:
        self._comments = comments

    def set_status(self, message: str, in_progress: bool) -> None:
        """Update the status text and enable the save button only when nothing is running."""
        self._save_enabled = not in_progress
        self._status_text = message

    def set_security_stripping(self, enabled: bool) -> bool:
        """Apply a checkbox toggle. Returns False when stripping is locked off."""
        if self._stripping_locked:
            logger.warning('Security stripping is locked, ignoring toggle', requested=enabled)
            return False
        self._policy.set(enabled)
        logger.info('Security stripping updated', enabled=enabled)
        return True

    def lock_stripping_to_false(self) -> None:
        """Force stripping off and stop users from turning it back on."""
        self._policy.set(False)
        if not self._stripping_locked:
            logger.info('Security stripping locked off, showing privacy warning')
        self._stripping_locked = True
        self._privacy_warning_visible = True

    def on_load_complete(self, dump: Any) -> bool:
        """Cache a loaded dump for future saves and show its comments for editing."""
        self._loaded_dump = dump
        self._comments = dump.user_comments
        logger.info('Loaded dump cached for export')
        return True

    def request_save(self) -> SaveDispatch:
        """Start a save unless one is running or the comments are empty."""
        if self._status is SaveStatus.IN_PROGRESS:
            logger.debug('Save already in progress, ignoring request')
            return SaveDispatch.IGNORED

        # Reset the marker in case an earlier attempt set it
        self._comments_invalid = False
        self._warning = None
        try:
            comments = validate_comments(self._comments)
        except CommentsRequiredError as e:
            self._comments_invalid = True
            self._warning = e.message
            logger.info('Save rejected, comments are required')
            return SaveDispatch.REJECTED

        self._status = SaveStatus.IN_PROGRESS
        self._generation += 1
        generation = self._generation
        self.set_status(self.PREPARING_TEXT, True)
        dispatch = SaveDispatch.SYNC if self._loaded_dump is not None else SaveDispatch.ASYNC

        try:
            # Drop the previous dump before building a new one
            self._resources.release()
            build = self._dispatch_build(generation, comments, self._policy.get())
        except Exception as e:
            self._on_dump_failed(generation, e)
            return dispatch

        if isinstance(build, SyncBuild):
            self._on_dump_created(generation, build.text)
        return dispatch

    def _dispatch_build(self, generation: int, comments: str, strip_sensitive: bool) -> DumpBuild:
        if self._loaded_dump is not None:
            logger.info('Updating loaded dump', strip_sensitive=strip_sensitive)
            return SyncBuild(self._builder.update_dump(comments, self._loaded_dump, strip_sensitive))

        logger.info('Collecting live data for dump', strip_sensitive=strip_sensitive, generation=generation)
        self._builder.build_dump_async(
            comments,
            strip_sensitive,
            partial(self._on_dump_created, generation),
            partial(self._on_dump_failed, generation),
        )
        return AsyncBuild()

    def _is_current(self, generation: int) -> bool:
        return self._status is SaveStatus.IN_PROGRESS and generation == self._generation

    def _on_dump_created(self, generation: int, text: str) -> None:
        if not self._is_current(generation):
            logger.warning('Dump completed for a save that is no longer running, ignoring', generation=generation)
            return

        try:
            handle = self._resources.replace_resource(text)
        except Exception as e:
            self._on_dump_failed(generation, e)
            return

        self._finish(self.SUCCESS_TEXT)
        logger.info('Dump ready for download', handle=handle, size=len(text))

    def _on_dump_failed(self, generation: int, error: Exception) -> None:
        if not self._is_current(generation):
            logger.warning(f'Dump failure reported for a save that is no longer running: {error}', generation=generation)
            return

        reason = getattr(error, 'message', None) or str(error) or type(error).__name__
        logger.error(f'Dump failed: {reason}', error_type=type(error).__name__)
        self._finish(f'{self.FAILURE_TEXT}: {reason}')

    def _finish(self, message: str) -> None:
        self._status = SaveStatus.IDLE
        self.set_status(message, False)

    def view(self) -> ExportViewState:
        """Snapshot of what the presentation layer should render."""
        return ExportViewState(
            status=self._status,
            status_text=self._status_text,
            save_enabled=self._save_enabled,
            comments=self._comments,
            comments_invalid=self._comments_invalid,
            warning=self._warning,
            download_handle=self._resources.handle,
            security_stripping=self._policy.get(),
            stripping_locked=self._stripping_locked,
            privacy_warning_visible=self._privacy_warning_visible,
            has_loaded_dump=self._loaded_dump is not None,
        )
