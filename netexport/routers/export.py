"""Export view endpoints: comments, stripping toggle, load, save and download."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel

from netexport.config.log import get_logger
from netexport.dependencies import get_export_controller_dependency, get_service_container_dependency
from netexport.dependencies.container import ServiceContainer
from netexport.downloads.sink import InMemoryDownloadSink
from netexport.dump.models import LogDump
from netexport.export.controller import ExportController
from netexport.export.view import SaveDispatch

router = APIRouter(prefix='/api/export', tags=['Export'])
logger = get_logger(__name__)


class CommentsUpdate(BaseModel):
    comments: str


class StrippingUpdate(BaseModel):
    enabled: bool


def _error(status_code: int, error_type: str, message: str, **extra: Any) -> ORJSONResponse:
    return ORJSONResponse({'type': 'error', 'error': {'type': error_type, 'message': message}, **extra}, status_code=status_code)


def _state(request: Request, controller: ExportController) -> Dict[str, Any]:
    state = controller.view().model_dump(mode='json')
    handle = state['download_handle']
    state['download_url'] = str(request.app.url_path_for('download_dump', handle_id=InMemoryDownloadSink.handle_id(handle))) if handle else None
    return state


@router.get('')
async def get_export_state(request: Request, controller: ExportController = Depends(get_export_controller_dependency)):
    return _state(request, controller)


@router.put('/comments')
async def update_comments(payload: CommentsUpdate, request: Request, controller: ExportController = Depends(get_export_controller_dependency)):
    controller.set_user_comments(payload.comments)
    return _state(request, controller)


@router.put('/security-stripping')
async def update_security_stripping(payload: StrippingUpdate, request: Request, controller: ExportController = Depends(get_export_controller_dependency)):
    if not controller.set_security_stripping(payload.enabled):
        return _error(409, 'stripping_locked', 'Security stripping cannot be changed while the privacy warning is shown', state=_state(request, controller))
    return _state(request, controller)


@router.post('/privacy-warning')
async def show_privacy_warning(request: Request, controller: ExportController = Depends(get_export_controller_dependency)):
    controller.lock_stripping_to_false()
    return _state(request, controller)


@router.post('/load')
async def load_dump(payload: LogDump, request: Request, controller: ExportController = Depends(get_export_controller_dependency)):
    controller.on_load_complete(payload)
    return _state(request, controller)


@router.post('/save')
async def save_dump(request: Request, controller: ExportController = Depends(get_export_controller_dependency)):
    dispatch = controller.request_save()

    if dispatch is SaveDispatch.REJECTED:
        return _error(422, 'invalid_request_error', controller.view().warning, state=_state(request, controller))
    if dispatch is SaveDispatch.IGNORED:
        return _error(409, 'save_in_progress', 'A dump is already being saved', state=_state(request, controller))

    return ORJSONResponse({'dispatch': dispatch.value, 'state': _state(request, controller)}, status_code=202)


@router.get('/downloads/{handle_id}', name='download_dump')
async def download_dump(handle_id: str, container: ServiceContainer = Depends(get_service_container_dependency)):
    try:
        data = container.sink.open(InMemoryDownloadSink.handle_for_id(handle_id))
    except KeyError:
        logger.info('Requested download is not available', handle_id=handle_id)
        return _error(404, 'not_found_error', 'Download not found or no longer available')

    filename = container.app_config.download_filename
    return Response(content=data, media_type='application/octet-stream', headers={'Content-Disposition': f'attachment; filename="{filename}"'})


@router.get('/events')
async def live_events(container: ServiceContainer = Depends(get_service_container_dependency)):
    events = container.collector.events()
    if container.policy.get():
        events = container.stripper.strip_events(events)
    return {'security_stripping': container.policy.get(), 'events': events}
