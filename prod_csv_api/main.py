from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from .config import get_settings
from .errors import IngestError, SourceFileNotFound
from .models import (
    DatasetKind,
    ErrorResponse,
    HealthResponse,
    NotFoundResponse,
    ProductionRecord,
    StatusRecord,
)
from .service import IngestionService
from .storage import create_tables, get_engine

ERROR_RESPONSES = {
    404: {"model": NotFoundResponse, "description": "Source file for the current date does not exist yet"},
    500: {"model": ErrorResponse, "description": "File, parse or database failure"},
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    create_tables(get_engine(settings.database_url))
    logger.info("Reading CSV files under {}", settings.data_root.resolve())
    yield
    logger.info("CSV Production API shutting down")


app = FastAPI(
    title="CSV Production API",
    description="Latest production and machine status rows from shop-floor CSV logs",
    version="1.0.0",
    lifespan=lifespan,
)


def get_service() -> IngestionService:
    settings = get_settings()
    return IngestionService(
        engine=get_engine(settings.database_url),
        data_root=settings.data_root,
        encoding=settings.csv_encoding,
    )


@app.exception_handler(SourceFileNotFound)
async def source_file_not_found_handler(request: Request, exc: SourceFileNotFound):
    logger.warning(f"{exc.expected_file} not found - {request.method} {request.url.path}")
    return JSONResponse(
        status_code=404,
        content={"error": "File not found", "expected_file": exc.expected_file, "path": exc.path},
    )


@app.exception_handler(IngestError)
async def ingest_error_handler(request: Request, exc: IngestError):
    logger.opt(exception=exc).error(
        f"{type(exc).__name__}: {exc} - {request.method} {request.url.path}"
    )
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/api/trd", response_model=ProductionRecord, responses=ERROR_RESPONSES)
def latest_production(service: IngestionService = Depends(get_service)):
    return service.handle(DatasetKind.DAILY)


@app.get("/api/sts", response_model=StatusRecord, responses=ERROR_RESPONSES)
def latest_status(service: IngestionService = Depends(get_service)):
    return service.handle(DatasetKind.MONTHLY)
