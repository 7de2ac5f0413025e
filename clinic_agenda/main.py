import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import CORS_ORIGINS, SECURITY_HEADERS_ENABLED
from .database import Base, engine
from .domain.accounts.router import router as user_router
from .domain.appointments.router import occupancy_router
from .domain.appointments.router import router as appointments_router
from .domain.clients.router import availability_router
from .domain.clients.router import router as clients_router
from .domain.settings.router import router as settings_router
from .domain.therapists.router import router as therapists_router
from .domain.therapists.router import working_hours_router
from .routes.admin import router as admin_router
from .routes.auth import router as auth_router
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("passlib").setLevel(logging.ERROR)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Clinic Agenda API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Every handled error is rendered as {"error": message}"""
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
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
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"])
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {CORS_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(admin_router, prefix=API_PREFIX)
app.include_router(user_router, prefix=API_PREFIX)
app.include_router(therapists_router, prefix=API_PREFIX)
app.include_router(working_hours_router, prefix=API_PREFIX)
app.include_router(clients_router, prefix=API_PREFIX)
app.include_router(availability_router, prefix=API_PREFIX)
app.include_router(appointments_router, prefix=API_PREFIX)
app.include_router(occupancy_router, prefix=API_PREFIX)
app.include_router(settings_router, prefix=API_PREFIX)


@app.get("/")
def root():
    return {"message": "Clinic Agenda API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
