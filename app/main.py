import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import models  # noqa: F401  (registers tables on Base)
from .config import ALLOWED_ORIGINS, SECURITY_HEADERS_ENABLED
from .database import Base, engine
from .domain.bookings import admin_router as admin_bookings_router
from .domain.bookings import client_router as client_bookings_router
from .domain.catalog import admin_router as admin_services_router
from .domain.catalog import manage_router as manage_services_router
from .domain.catalog import public_router as public_services_router
from .domain.dashboard import router as dashboard_router
from .domain.stylists import admin_router as admin_stylists_router
from .domain.stylists import manage_router as manage_stylists_router
from .domain.stylists import public_router as public_stylists_router
from .domain.users import admin_router as admin_users_router
from .domain.users import auth_router
from .rate_limiter import get_redis_client
from .routes.websocket import router as websocket_router
from .security_headers import SecurityHeadersMiddleware
from .services.notification_service import ConnectionRegistry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Salon Booking API starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("✅ Database tables ready")
    except SQLAlchemyError as e:
        # Several workers can race to create the same tables
        if "already exists" not in str(e) and "duplicate key" not in str(e):
            raise
        logger.info("Database tables already created by another worker")

    try:
        get_redis_client()
        logger.info("✅ Redis connection established")
    except Exception as e:
        logger.warning(f"⚠️ Redis unavailable, rate limits are per process: {e}")

    yield

    dropped = app.state.connection_registry.user_count
    app.state.connection_registry.clear()
    logger.info(f"Shutting down, dropping WebSocket registrations for {dropped} user(s)")


app = FastAPI(title="Salon Booking API", version="1.0.0", lifespan=lifespan)

# User id → open WebSocket connections, for booking status notifications
app.state.connection_registry = ConnectionRegistry()


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Field-level validation failures as 400 Invalid input data"""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg"),
            "type": error.get("type"),
        }
        for error in exc.errors()
    ]
    logger.warning(f"Validation error for {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"detail": "Invalid input data", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


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
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(admin_users_router)

# Public catalog (also under /api/client for the mobile app)
for prefix in ("/api", "/api/client"):
    app.include_router(public_services_router, prefix=prefix)
    app.include_router(public_stylists_router, prefix=prefix)

# Admin catalog management; write routes are also reachable without the /admin segment
app.include_router(admin_services_router, prefix="/api/admin")
app.include_router(admin_stylists_router, prefix="/api/admin")
for prefix in ("/api/admin", "/api"):
    app.include_router(manage_services_router, prefix=prefix)
    app.include_router(manage_stylists_router, prefix=prefix)

# Bookings
for prefix in ("/api/client", "/api"):
    app.include_router(client_bookings_router, prefix=prefix)
app.include_router(admin_bookings_router, prefix="/api/admin")
app.include_router(dashboard_router, prefix="/api/admin")

app.include_router(websocket_router)


@app.get("/")
def root():
    return {"message": "Salon Booking API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/health/redis")
async def redis_health_check():
    """Redis round trip used by the shared rate limit counters"""
    try:
        client = get_redis_client()
        started = time.perf_counter()
        client.ping()
        latency_ms = (time.perf_counter() - started) * 1000
        version = client.info("server").get("redis_version", "unknown")
    except Exception as e:
        return {"status": "unhealthy", "redis": {"connected": False, "error": str(e)}}

    return {
        "status": "healthy",
        "redis": {"connected": True, "response_time_ms": round(latency_ms, 2), "version": version},
    }
