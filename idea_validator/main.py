# idea_validator/main.py
import logging
import logging.config
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from idea_validator.core.config import settings
from idea_validator.core.exceptions import InputValidationError
from idea_validator.db.database import init_db
from idea_validator.models.idea_models import ErrorDetail, ErrorResponse
from idea_validator.routers import idea_router

# --- Logging Configuration ---
def setup_logging(log_level: str = "INFO"):
    """Configures structured logging for the application."""
    app_level = "INFO" if settings.is_production else "DEBUG"
    LOGGING_CONFIG = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter", # Use Uvicorn's formatter for consistency
                "fmt": "%(levelprefix)s %(asctime)s - %(name)s - %(module)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
                "use_colors": True,
            },
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": '%(levelprefix)s %(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s',
                "datefmt": "%Y-%m-%d %H:%M:%S",
                "use_colors": True,
            },
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
            },
            "access": {
                "formatter": "access",
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "root": {"handlers": ["default"], "level": log_level},
            "uvicorn": {"handlers": ["default"], "level": log_level, "propagate": False},
            "uvicorn.error": {"level": log_level, "handlers": ["default"], "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
            "idea_validator": {"handlers": ["default"], "level": app_level, "propagate": False},
            "sqlalchemy.engine": {"handlers": ["default"], "level": "WARNING", "propagate": False},
        },
    }
    logging.config.dictConfig(LOGGING_CONFIG)

APP_LOG_LEVEL = "DEBUG" if settings.ENVIRONMENT == "development" else "INFO"
setup_logging(log_level=APP_LOG_LEVEL)
logger = logging.getLogger("idea_validator.main")

# --- FastAPI Lifespan Events ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application lifespan: Startup sequence initiated.")
    init_db()
    yield
    logger.info("Application lifespan: Shutdown sequence initiated.")

# --- FastAPI App Initialization ---
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=(
        "API backend that validates product ideas: Google's Gemini model produces a structured "
        "analysis of users, pain points, features, risks, metrics and market, which is stored "
        "and can be retrieved or rendered as a report."
    ),
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.ENVIRONMENT == "development" else settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# --- Custom Exception Handlers ---
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Custom handler for Pydantic's RequestValidationError to provide a more structured error response.
    """
    logger.warning(f"Request validation error for URL '{request.url}'. Errors: {exc.errors()}", exc_info=False)
    error_details = [
        ErrorDetail(loc=err.get("loc"), msg=err.get("msg"), type=err.get("type"))
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(detail=error_details).model_dump(),
    )

@app.exception_handler(InputValidationError)
async def input_validation_exception_handler(request: Request, exc: InputValidationError):
    logger.warning(f"Input validation error for URL '{request.url}'. Errors: {exc.errors}", exc_info=False)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(detail=[ErrorDetail(**err) for err in exc.errors]).model_dump(),
    )

@app.exception_handler(Exception) # Generic catch-all for unhandled exceptions
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled global exception for URL '{request.url}'. Error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(detail="An unexpected internal server error occurred. The technical team has been notified.").model_dump(),
    )

# --- API Routers ---
app.include_router(idea_router.router, prefix=settings.API_V1_STR)

# --- Root Endpoint & Health Check ---
@app.get("/", tags=["General"], summary="API Root Endpoint", response_model=dict)
async def read_root():
    """Provides basic information about the API."""
    return {
        "project_name": settings.PROJECT_NAME,
        "version": app.version,
        "environment": settings.ENVIRONMENT,
        "message": f"Welcome! API is operational. Visit '{app.docs_url}' or '{app.redoc_url}' for documentation.",
        "api_prefix": settings.API_V1_STR
    }

@app.get("/health", tags=["General"], summary="API Health Check", response_model=dict)
async def health_check():
    logger.debug("Health check endpoint '/health' accessed.")
    return {"status": "healthy", "message": "API is operational and ready to serve requests."}

logger.info(f"'{settings.PROJECT_NAME}' (v{app.version}) application configured.")
logger.info(f"Running in '{settings.ENVIRONMENT}' mode. Log level: {APP_LOG_LEVEL}. API prefix: '{settings.API_V1_STR}'.")
