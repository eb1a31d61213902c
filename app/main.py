from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from app.config.settings import settings
from app.core.errors import ForbiddenError, InvalidArgumentError, NotFoundError, TrainingError, UnauthenticatedError
from app.core.logger import setup_logger
from app.db.models import Base
from app.db.session import check_database_connection, get_engine
from app.executions.routes import router as training_executions_router
from app.sessions.routes import router as training_sessions_router

# Initialize logger
setup_logger(level=settings.log_level, log_file=settings.log_file)

_ERROR_STATUS: dict[type[TrainingError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
}


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Verify the database and make sure tables exist on startup."""
    check_database_connection()
    logger.info("Ensuring database tables exist")
    Base.metadata.create_all(bind=get_engine())
    logger.info("Database tables verified")
    yield
    logger.info("Application shutdown")


app = FastAPI(title="Fitness Tracker Service", lifespan=lifespan)

app.include_router(training_executions_router)
app.include_router(training_sessions_router)

logger.info("FastAPI application initialized")


@app.exception_handler(TrainingError)
async def training_error_handler(request: Request, exc: TrainingError) -> JSONResponse:
    """Translate domain errors into HTTP responses with a discriminant and detail."""
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.warning(
        f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
        status_code=status_code,
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.code},
        headers=headers,
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    logger.debug(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
    return response
