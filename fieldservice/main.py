import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fieldservice.core.config import settings
from fieldservice.core.exceptions import FieldServiceError
from fieldservice.core.logging_config import configure_logging
from fieldservice.api.v1.api import api_router
from fieldservice.api.v1.endpoints.routing import router as route_router
from fieldservice.db.session import init_db
from fieldservice.services.labels import LabelCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s %s started (%s)", settings.PROJECT_NAME, settings.VERSION, settings.ENVIRONMENT)
    yield


async def field_service_error_handler(request: Request, exc: FieldServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )

    # One label cache per running application; tests replace it
    app.state.label_cache = LabelCache()

    # Set up CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify actual origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FieldServiceError, field_service_error_handler)

    # Include API routes separately
    app.include_router(api_router, prefix=settings.API_V1_STR)

    # Driving estimate lives at the root
    app.include_router(route_router)
    return app


app = create_app()
