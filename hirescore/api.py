"""
HTTP interface for the hiring service.

Routes delegate to hirescore.service; domain exceptions are mapped to JSON
error bodies here.
"""

from contextlib import asynccontextmanager
from typing import Any, List, Optional

from fastapi import APIRouter, Body, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__, service
from .config import Settings
from .logger import StructuredLogger, configure_logger
from .models import Application, Job
from .storage import Store, memory_store

API_TITLE = "Hiring Scoring API"


def _validation_response(details: List[str]) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Validation failed", "details": details})


def _request_error_messages(exc: RequestValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        msg = err.get("msg", "Invalid request")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return messages


def build_store(settings: Settings) -> Store:
    if settings.db_path is not None:
        from .database import sql_store
        return sql_store(settings.db_path)
    return memory_store()


def build_router(store: Store, logger: StructuredLogger) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["hiring"])

    @router.post("/jobs", status_code=201, response_model=Job, response_model_exclude_none=True)
    def create_job(payload: Any = Body(None)):
        return service.create_job(payload, store, logger)

    @router.get("/jobs", response_model=List[Job], response_model_exclude_none=True)
    def list_jobs():
        return service.list_jobs(store)

    @router.get("/jobs/{job_id}", response_model=Job, response_model_exclude_none=True)
    def get_job(job_id: str):
        return service.get_job(job_id, store)

    @router.get("/jobs/{job_id}/applications", response_model=List[Application])
    def list_applications(job_id: str, sort_by: Optional[str] = Query(None, alias="sortBy")):
        return service.list_applications(job_id, store, sort_by)

    @router.post("/applications", status_code=201, response_model=Application)
    def submit_application(payload: Any = Body(None)):
        return service.submit_application(payload, store, logger)

    @router.get("/applications/{application_id}", response_model=Application)
    def get_application(application_id: str):
        return service.get_application(application_id, store)

    return router


def create_app(
    store: Optional[Store] = None,
    settings: Optional[Settings] = None,
    logger: Optional[StructuredLogger] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        store: Repositories to use; built from settings when omitted
        settings: Runtime settings; read from the environment when omitted
        logger: Logger; replaces the global logger with one built from settings when omitted
    """
    settings = settings or Settings.from_env()
    logger = logger or configure_logger(level=settings.log_level, log_dir=settings.log_dir)
    store = store if store is not None else build_store(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        logger.log_metrics_summary()

    app = FastAPI(title=API_TITLE, version=__version__, lifespan=lifespan)
    app.state.store = store
    app.state.settings = settings

    @app.get("/")
    def index():
        return {"message": API_TITLE, "version": __version__}

    @app.get("/healthz", include_in_schema=False)
    def healthz():
        return {"status": "ok"}

    app.include_router(build_router(store, logger))

    @app.exception_handler(service.ValidationError)
    async def _validation_error(_request: Request, exc: service.ValidationError):
        return _validation_response(exc.errors)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(_request: Request, exc: RequestValidationError):
        logger.record_validation_failure()
        return _validation_response(_request_error_messages(exc))

    @app.exception_handler(service.NotFoundError)
    async def _not_found(_request: Request, exc: service.NotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(_request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"error": "Endpoint not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.record_error(type(exc).__name__)
        logger.error("Unhandled error", path=request.url.path, error=str(exc))
        content = {"error": "Internal server error"}
        if settings.is_development:
            content["message"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    return app
