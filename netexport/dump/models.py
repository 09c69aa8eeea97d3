from typing import Any, Dict, List

import orjson
from pydantic import BaseModel, ConfigDict, Field


class LogDump(BaseModel):
    """A captured diagnostic session plus the user's explanation for it."""

    model_config = ConfigDict(extra='allow')

    user_comments: str = ''
    constants: Dict[str, Any] = Field(default_factory=dict)
    events: List[Dict[str, Any]] = Field(default_factory=list)
    polled_data: Dict[str, Any] = Field(default_factory=dict)
    tab_data: Dict[str, Any] = Field(default_factory=dict)

    def render(self) -> str:
        """Serialize to indented JSON text."""
        return orjson.dumps(self.model_dump(mode='json'), option=orjson.OPT_INDENT_2).decode('utf-8')

    @classmethod
    def parse(cls, text: str | bytes) -> 'LogDump':
        """Parse dump text produced by `render`. Raises ValueError on malformed input."""
        return cls.model_validate(orjson.loads(text))
