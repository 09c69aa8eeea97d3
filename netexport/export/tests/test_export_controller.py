from types import SimpleNamespace

import pytest

from netexport.dump.policy import SecurityStrippingPolicy
from netexport.export.controller import ExportController
from netexport.export.exceptions import DumpBuildError, ResourceCreationError
from netexport.export.interfaces import DownloadSink, DumpBuilder
from netexport.export.view import SaveDispatch, SaveStatus


class RecordingBuilder(DumpBuilder):
    """Builder that records calls and lets the test fire async callbacks."""

    def __init__(self, update_result='DUMP2'):
        self.update_result = update_result
        self.update_calls = []
        self.async_calls = []

    def update_dump(self, comments, cached_dump, strip_sensitive):
        self.update_calls.append((comments, cached_dump, strip_sensitive))
        if isinstance(self.update_result, Exception):
            raise self.update_result
        return self.update_result

    def build_dump_async(self, comments, strip_sensitive, on_done, on_error):
        self.async_calls.append(SimpleNamespace(comments=comments, strip_sensitive=strip_sensitive, on_done=on_done, on_error=on_error))

    @property
    def dispatched(self):
        return len(self.update_calls) + len(self.async_calls)


class RecordingSink(DownloadSink):
    def __init__(self):
        self.created = []
        self.revoked = []
        self.fail_next = False

    def create_handle(self, text):
        if self.fail_next:
            self.fail_next = False
            raise ResourceCreationError('out of space')
        handle = f'H{len(self.created) + 1}'
        self.created.append((handle, text))
        return handle

    def revoke(self, handle):
        assert handle in [h for h, _ in self.created], f'unknown handle {handle}'
        assert handle not in self.revoked, f'{handle} revoked twice'
        self.revoked.append(handle)

    @property
    def live(self):
        return [h for h, _ in self.created if h not in self.revoked]


@pytest.fixture
def builder():
    return RecordingBuilder()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def policy():
    return SecurityStrippingPolicy(True)


@pytest.fixture
def controller(builder, policy, sink):
    return ExportController(builder, policy, sink)


def loaded_dump(comments='from file'):
    return SimpleNamespace(user_comments=comments)


class TestRequestSaveValidation:
    def test_empty_comments_are_rejected_without_side_effects(self, controller, builder, sink):
        result = controller.request_save()

        assert result is SaveDispatch.REJECTED
        assert controller.status is SaveStatus.IDLE
        assert builder.dispatched == 0
        assert sink.created == []

        view = controller.view()
        assert view.comments_invalid is True
        assert view.warning == 'Please fill in the text field!'
        assert view.save_enabled is True
        assert view.download_handle is None

    def test_single_space_is_accepted(self, controller, builder):
        controller.set_user_comments(' ')

        assert controller.request_save() is SaveDispatch.ASYNC
        assert builder.async_calls[0].comments == ' '

    def test_valid_attempt_clears_invalid_marker(self, controller, builder):
        controller.request_save()
        controller.set_user_comments('reason')
        controller.request_save()

        view = controller.view()
        assert view.comments_invalid is False
        assert view.warning is None

    def test_rejection_does_not_release_existing_download(self, controller, builder, sink):
        controller.set_user_comments('reason')
        controller.request_save()
        builder.async_calls[0].on_done('DUMP1')

        controller.set_user_comments('')
        controller.request_save()

        assert sink.revoked == []
        assert controller.download_handle == 'H1'


class TestAsyncPath:
    def test_async_build_completes_with_download(self, controller, builder, sink, policy):
        controller.set_user_comments('reason')

        assert controller.request_save() is SaveDispatch.ASYNC
        assert controller.status is SaveStatus.IN_PROGRESS
        view = controller.view()
        assert view.status_text == 'Preparing data...'
        assert view.save_enabled is False

        call = builder.async_calls[0]
        assert (call.comments, call.strip_sensitive) == ('reason', policy.get())

        call.on_done('DUMP1')

        assert sink.created == [('H1', 'DUMP1')]
        view = controller.view()
        assert view.status is SaveStatus.IDLE
        assert view.status_text == 'Dump successful'
        assert view.save_enabled is True
        assert view.download_handle == 'H1'

    def test_reentrant_request_is_ignored(self, controller, builder):
        controller.set_user_comments('reason')
        controller.request_save()

        assert controller.request_save() is SaveDispatch.IGNORED
        assert builder.dispatched == 1
        assert controller.status is SaveStatus.IN_PROGRESS

    def test_build_failure_returns_to_idle(self, controller, builder, sink):
        controller.set_user_comments('reason')
        controller.request_save()

        builder.async_calls[0].on_error(DumpBuildError('poll timed out'))

        view = controller.view()
        assert view.status is SaveStatus.IDLE
        assert view.save_enabled is True
        assert view.status_text == 'Dump failed: poll timed out'
        assert sink.created == []

        # The user may retry
        assert controller.request_save() is SaveDispatch.ASYNC
        assert builder.dispatched == 2

    def test_dispatch_error_returns_to_idle(self, controller, builder):
        def explode(*args):
            raise RuntimeError('no running event loop')

        builder.build_dump_async = explode
        controller.set_user_comments('reason')

        controller.request_save()

        assert controller.status is SaveStatus.IDLE
        assert controller.view().status_text == 'Dump failed: no running event loop'

    def test_late_callback_is_ignored(self, controller, builder, sink):
        controller.set_user_comments('reason')
        controller.request_save()
        call = builder.async_calls[0]
        call.on_done('DUMP1')

        call.on_done('DUMP1-again')
        call.on_error(DumpBuildError('late'))

        assert sink.created == [('H1', 'DUMP1')]
        assert controller.view().status_text == 'Dump successful'

    def test_stale_callback_does_not_complete_newer_save(self, controller, builder, sink):
        controller.set_user_comments('reason')
        controller.request_save()
        first = builder.async_calls[0]
        first.on_error(DumpBuildError('poll timed out'))

        controller.request_save()
        first.on_done('STALE')

        assert controller.status is SaveStatus.IN_PROGRESS
        assert controller.view().status_text == 'Preparing data...'
        assert sink.created == []

        first.on_error(DumpBuildError('late'))
        assert controller.status is SaveStatus.IN_PROGRESS

        builder.async_calls[1].on_done('FRESH')

        assert sink.created == [('H1', 'FRESH')]
        assert controller.download_handle == 'H1'
        assert controller.view().status_text == 'Dump successful'


class TestSyncPath:
    def test_load_complete_copies_comments_and_switches_to_sync(self, controller, builder):
        dump = loaded_dump('stored reason')

        assert controller.on_load_complete(dump) is True
        assert controller.comments == 'stored reason'
        assert controller.status is SaveStatus.IDLE
        assert builder.dispatched == 0

        assert controller.request_save() is SaveDispatch.SYNC
        assert builder.update_calls == [('stored reason', dump, True)]
        assert builder.async_calls == []

    def test_sync_update_replaces_previous_download(self, controller, builder, sink):
        controller.set_user_comments('reason')
        controller.request_save()
        builder.async_calls[0].on_done('DUMP1')

        dump = loaded_dump()
        controller.on_load_complete(dump)
        controller.set_user_comments('reason2')

        assert controller.request_save() is SaveDispatch.SYNC

        assert builder.update_calls == [('reason2', dump, True)]
        assert sink.created[-1] == ('H2', 'DUMP2')
        assert sink.revoked == ['H1']
        assert sink.live == ['H2']
        view = controller.view()
        assert view.status is SaveStatus.IDLE
        assert view.status_text == 'Dump successful'
        assert view.download_handle == 'H2'

    def test_newer_load_overwrites_cached_dump(self, controller, builder):
        first, second = loaded_dump('first'), loaded_dump('second')
        controller.on_load_complete(first)
        controller.on_load_complete(second)

        controller.request_save()

        assert builder.update_calls == [('second', second, True)]

    def test_sync_update_failure(self, controller, builder, sink):
        builder.update_result = DumpBuildError('corrupt dump')
        controller.on_load_complete(loaded_dump())

        controller.request_save()

        view = controller.view()
        assert view.status is SaveStatus.IDLE
        assert view.status_text == 'Dump failed: corrupt dump'
        assert view.download_handle is None
        assert sink.created == []


class TestResourceLifecycle:
    @pytest.mark.parametrize('saves', [1, 2, 5])
    def test_only_latest_handle_stays_live(self, controller, builder, sink, saves):
        controller.set_user_comments('reason')
        for i in range(saves):
            controller.request_save()
            builder.async_calls[-1].on_done(f'DUMP{i}')

        assert len(sink.live) == 1
        assert len(sink.revoked) == saves - 1
        assert controller.download_handle == sink.live[0]

    def test_previous_handle_released_when_save_starts(self, controller, builder, sink):
        controller.set_user_comments('reason')
        controller.request_save()
        builder.async_calls[0].on_done('DUMP1')

        controller.request_save()

        assert sink.revoked == ['H1']
        assert controller.download_handle is None

    def test_sink_failure_leaves_no_handle(self, controller, builder, sink):
        controller.set_user_comments('reason')
        controller.request_save()
        builder.async_calls[0].on_done('DUMP1')

        sink.fail_next = True
        controller.request_save()
        builder.async_calls[1].on_done('DUMP2')

        view = controller.view()
        assert view.status is SaveStatus.IDLE
        assert view.status_text == 'Dump failed: out of space'
        assert view.download_handle is None
        assert sink.live == []


class TestStripping:
    def test_lock_forces_false_and_blocks_toggles(self, controller, builder, policy):
        controller.lock_stripping_to_false()

        assert controller.set_security_stripping(True) is False
        assert policy.get() is False

        controller.set_user_comments('reason')
        controller.request_save()
        assert builder.async_calls[0].strip_sensitive is False

        view = controller.view()
        assert view.stripping_locked is True
        assert view.privacy_warning_visible is True
        assert view.security_stripping is False

    def test_lock_is_idempotent(self, controller, policy):
        controller.lock_stripping_to_false()
        controller.lock_stripping_to_false()

        assert policy.get() is False
        assert controller.stripping_locked is True

    def test_toggle_is_read_at_build_time(self, controller, builder):
        controller.set_user_comments('reason')
        assert controller.set_security_stripping(False) is True

        controller.request_save()

        assert builder.async_calls[0].strip_sensitive is False


def test_set_status_only_touches_presentation(controller):
    controller.set_status('Collecting...', True)

    view = controller.view()
    assert view.status_text == 'Collecting...'
    assert view.save_enabled is False
    assert view.status is SaveStatus.IDLE
