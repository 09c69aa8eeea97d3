"""The two ways a dump build can be dispatched."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class SyncBuild:
    """Dump text produced in-process before dispatch returned."""

    text: str


@dataclass(frozen=True)
class AsyncBuild:
    """Build handed to the collector; its result arrives through a callback."""


DumpBuild = Union[SyncBuild, AsyncBuild]
