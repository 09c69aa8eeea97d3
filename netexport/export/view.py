from enum import Enum
from typing import Optional

from pydantic import BaseModel


class SaveStatus(str, Enum):
    IDLE = 'idle'
    IN_PROGRESS = 'in_progress'


class SaveDispatch(str, Enum):
    """What a save request turned into."""

    REJECTED = 'rejected'
    IGNORED = 'ignored'
    SYNC = 'sync'
    ASYNC = 'async'


class ExportViewState(BaseModel):
    """Everything the presentation layer renders for the export view."""

    status: SaveStatus = SaveStatus.IDLE
    status_text: str = ''
    save_enabled: bool = True
    comments: str = ''
    comments_invalid: bool = False
    warning: Optional[str] = None
    download_handle: Optional[str] = None
    security_stripping: bool = True
    stripping_locked: bool = False
    privacy_warning_visible: bool = False
    has_loaded_dump: bool = False
