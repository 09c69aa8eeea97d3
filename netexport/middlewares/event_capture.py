"""Record every handled request as a live diagnostic event."""

import time
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from netexport.context import get_correlation_id


class EventCaptureMiddleware(BaseHTTPMiddleware):
    """Append request/response metadata to the service container's collector.

    Headers are captured verbatim; stripping happens when a dump is built or
    events are displayed.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)

        container = getattr(request.app.state, 'service_container', None)
        if container is None:
            return response

        container.collector.record_event(
            {
                'type': 'http_request',
                'time': datetime.now(timezone.utc).isoformat(),
                'correlation_id': get_correlation_id(),
                'method': request.method,
                'path': request.url.path,
                'status_code': response.status_code,
                'duration_ms': round((time.perf_counter() - started) * 1000, 3),
                'request_headers': [f'{name}: {value}' for name, value in request.headers.items()],
                'response_headers': [f'{name}: {value}' for name, value in response.headers.items()],
            }
        )
        return response
