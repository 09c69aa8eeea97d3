import logging
from contextlib import asynccontextmanager
from pprint import pprint
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from netexport import __version__
from netexport.config import ConfigurationService, setup_config
from netexport.config.log import configure_structlog, get_logger
from netexport.dependencies.container import build_service_container
from netexport.middlewares.event_capture import EventCaptureMiddleware
from netexport.middlewares.request_context import RequestContextMiddleware
from netexport.routers.export import router as export_router
from netexport.routers.health import router as health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.service_container.close()


def create_app(config_service: Optional[ConfigurationService] = None) -> FastAPI:
    """Application factory for creating FastAPI instances.

    Args:
        config_service: Optional configuration service. If None, the user
            config under ~/.netexport is created if needed and loaded.

    Returns:
        Configured FastAPI application instance.
    """
    if config_service is None:
        setup_config()
        config_service = ConfigurationService()
    config = config_service.get_config()

    configure_structlog(config)
    logger = get_logger(__name__)

    service_container = build_service_container(config_service)

    app = FastAPI(title='netexport', version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.config_service = config_service
    app.state.service_container = service_container

    for k in logging.root.manager.loggerDict.keys():
        if any(k.startswith(v) for v in {'fastapi', 'uvicorn', 'httpx', 'httpcore'}):
            logging.getLogger(k).setLevel('INFO')

    app.include_router(health_router, prefix='/api', tags=['health'])
    app.include_router(export_router)

    # Middlewares run LIFO: request context wraps event capture
    app.add_middleware(EventCaptureMiddleware)
    app.add_middleware(GZipMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials=True,
        allow_methods=['GET', 'POST', 'PUT', 'OPTIONS'],
        allow_headers=['*'],
    )
    app.add_middleware(RequestContextMiddleware)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        error_msg = f'request validation error: {str(exc.errors())}'
        logger.debug('validation error', path=request.url.path)
        return ORJSONResponse(status_code=400, content={'type': 'error', 'error': {'type': 'invalid_request_error', 'message': error_msg}})

    if config.dev:
        pprint(config.model_dump())

    return app


if __name__ == '__main__':
    import uvicorn

    config = ConfigurationService().get_config()
    uvicorn.run(
        'netexport.main:create_app',
        factory=True,
        host=config.host,
        port=config.port,
        reload=config.dev,
    )
