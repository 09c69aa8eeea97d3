from netexport.export.builds import AsyncBuild, DumpBuild, SyncBuild
from netexport.export.controller import ExportController
from netexport.export.exceptions import CommentsRequiredError, DumpBuildError, ExportException, ResourceCreationError
from netexport.export.interfaces import DownloadSink, DumpBuilder, StrippingPolicy
from netexport.export.resources import ResourceSlot
from netexport.export.validation import validate_comments
from netexport.export.view import ExportViewState, SaveDispatch, SaveStatus

__all__ = [
    'AsyncBuild',
    'CommentsRequiredError',
    'DownloadSink',
    'DumpBuild',
    'DumpBuildError',
    'DumpBuilder',
    'ExportController',
    'ExportException',
    'ExportViewState',
    'ResourceCreationError',
    'ResourceSlot',
    'SaveDispatch',
    'SaveStatus',
    'StrippingPolicy',
    'SyncBuild',
    'validate_comments',
]
