# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Resource Management Service
===========================
Authenticates Engineers and Managers, lets Managers own projects, staff them
with engineers and allocate percentage-based tasks.

Every protected request is verified from its bearer token, authorized by the
access-control rules, then served by the project / task / identity stores.

Port: 8000
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from resource_service.controllers import (
    auth_controller,
    project_controller,
    system_controller,
    task_controller,
)
from resource_service.core.config import Settings, settings
from resource_service.core.database import create_db_engine, init_schema
from resource_service.core.dependencies import ServiceContainer
from resource_service.core.errors import NotFoundOrUnauthorizedError, ServiceError
from resource_service.core.logging import get_logger
from resource_service.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


def create_app(engine: Optional[Engine] = None, config: Settings = settings) -> FastAPI:
    """Build the application. The engine is created on startup unless one is supplied."""

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        db_engine = engine or create_db_engine(config.DATABASE_URL)
        init_schema(db_engine)
        application.state.container = ServiceContainer(db_engine, config)
        logger.info("%s v%s started", config.SERVICE_NAME, config.SERVICE_VERSION)
        yield
        application.state.container.dispose()
        logger.info("Shutting down — connection pool disposed")

    application = FastAPI(
        title="Resource Management Service",
        description="Projects, engineer assignments and task allocation with role-based access.",
        version=config.SERVICE_VERSION,
        lifespan=lifespan,
    )

    application.add_middleware(MetricsMiddleware)
    application.add_middleware(RequestIDMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=config.CORS_METHODS,
        allow_headers=config.CORS_HEADERS,
    )

    @application.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        # the concrete kind is logged; the response stays generic
        level = logging.WARNING if isinstance(exc, NotFoundOrUnauthorizedError) else logging.INFO
        logger.log(level, "%s %s -> %d %s: %s", request.method, request.url.path, exc.status_code,
            type(exc).__name__, exc.message, extra={"request_id": _request_id(request)})
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @application.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        missing = any(err.get("type") == "missing" for err in exc.errors())
        message = "Required fields missing" if missing else "Invalid request body"
        return JSONResponse(status_code=400, content={"message": message, "errors": errors})

    @application.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s %s", request.method, request.url.path,
                     exc_info=exc, extra={"request_id": _request_id(request)})
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s %s", request.method, request.url.path,
                     exc_info=exc, extra={"request_id": _request_id(request)})
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    application.include_router(system_controller.router)
    application.include_router(auth_controller.router)
    application.include_router(project_controller.router)
    application.include_router(task_controller.router)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=settings.SERVICE_PORT)
