"""Request context utilities for per-request state management."""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class RequestContext:
    """Structured context data attached to each inbound request."""

    correlation_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    path: Optional[str] = None
    method: Optional[str] = None

    # Arbitrary extras for logging
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self, include_none: bool = False) -> Dict[str, Any]:
        """Serialize context for structured logging."""
        result: Dict[str, Any] = {}

        for key, value in {
            'correlation_id': self.correlation_id,
            'path': self.path,
            'method': self.method,
        }.items():
            if include_none or value is not None:
                result[key] = value

        result.update(self.extra)
        return result


request_context_var: ContextVar[RequestContext] = ContextVar('request_context', default=RequestContext(correlation_id='-'))


def get_request_context() -> RequestContext:
    """Return the active request context."""

    return request_context_var.get()


def set_request_context(context: RequestContext) -> None:
    """Replace the current request context."""

    request_context_var.set(context)


def get_correlation_id() -> str:
    """Expose the correlation ID for log formatting helpers."""

    return request_context_var.get().correlation_id


__all__ = [
    'RequestContext',
    'get_request_context',
    'set_request_context',
    'get_correlation_id',
    'request_context_var',
]
