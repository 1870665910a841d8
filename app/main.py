import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.database import create_tables
from app.api.v1.router import api_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting up Bell Scheduler API...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"School timezone: {settings.SCHOOL_TIMEZONE}")

    # Create database tables
    await create_tables()
    logger.info("Database tables created successfully")

    if not settings.RESEND_API_KEY:
        logger.warning("RESEND_API_KEY is not set; booking confirmations will fail and be reported")

    logger.info("Bell Scheduler API startup complete")

    yield

    # Shutdown
    logger.info("Shutting down Bell Scheduler API...")


# Create FastAPI application
app = FastAPI(
    title="Bell Scheduler API",
    description="Bell schedule bookings and academic planning with review and approval",
    version="1.0.0",
    lifespan=lifespan,
    redirect_slashes=False,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)


# Production-only rate limiting
if settings.is_production:
    from app.middleware.rate_limit import setup_rate_limiting

    setup_rate_limiting(app)
    logger.info("Rate limiting enabled")


# Configure CORS (always enabled)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        settings.FRONTEND_URL,
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {
        "message": "Bell Scheduler API",
        "version": "1.0.0",
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "message": "Bell Scheduler API is running successfully"
    }
