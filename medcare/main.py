import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import ALLOWED_ORIGINS, LOG_LEVEL, SECURITY_HEADERS_ENABLED
from .database import Base, engine
from .domain.appointments.router import router as appointments_router
from .domain.catalog.router import router as medical_services_router
from .domain.doctors.router import router as doctors_router
from .domain.reports.router import router as reports_router
from .exceptions import ClinicError, NotFoundError, SlotConflictError, ValidationFailure
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="MedCare API", version="1.0.0", lifespan=lifespan)


def _error_response(status_code: int, exc: ClinicError, **extra) -> JSONResponse:
    content = {"detail": exc.message, "error": exc.kind}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    logger.info(f"{request.method} {request.url.path} - {exc.message}")
    return _error_response(404, exc)


@app.exception_handler(SlotConflictError)
async def slot_conflict_handler(request: Request, exc: SlotConflictError):
    logger.warning(f"{request.method} {request.url.path} - {exc.message}")
    return _error_response(409, exc, conflictingAppointments=exc.conflicting_ids)


@app.exception_handler(ValidationFailure)
async def validation_failure_handler(request: Request, exc: ValidationFailure):
    logger.warning(f"{request.method} {request.url.path} - {exc.message}")
    return _error_response(422, exc)


def _jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # pydantic puts the raised ValueError object in ctx, which is not JSON serializable
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": _jsonable_errors(exc), "error": "validation_failure"},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

app.include_router(doctors_router)
app.include_router(medical_services_router)
app.include_router(appointments_router)
app.include_router(reports_router)


@app.get("/")
def root():
    return {"message": "MedCare API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
