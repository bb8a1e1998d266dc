'''
FastAPI application entry point.
'''
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .database import engine as db_engine
from .common.logger import log
from .common.config import settings
from .common.exceptions import DataSourceError, NotFoundError
from .api import availability, bookings, matching

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Opens the database engine for the lifetime of the app.
    """
    log.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} (test mode: {settings.TEST_MODE})")
    db_engine.create_db_engine_and_session_factory()

    yield

    log.info("Shutting down, disposing database engine...")
    await db_engine.dispose_db_engine()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

origins = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:8081",
    *settings.BACKEND_CORS_ORIGINS,
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],)


# Storage and lookup failures that escape a route
@app.exception_handler(DataSourceError)
async def data_source_error_handler(request: Request, exc: DataSourceError):
    log.error(f"{request.method} {request.url.path} failed on the data source: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Scheduling data is temporarily unavailable."}
    )

@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.get("/")
async def health_check():
    return {
        "status": "ok",
        "message": f"{settings.APP_NAME} is running",
        "database": "ready" if db_engine.AsyncSessionLocal is not None else "not initialised"
    }

for api_module in (availability, bookings, matching):
    app.include_router(api_module.router)
