# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Hare Krishna Vidya CMS API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.exceptions import (
    CMSException,
    cms_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    campaigns,
    careers,
    donations,
    donor_wall,
    forms,
    grocery,
    health,
    photo_gallery,
    uploads,
    video_gallery,
)
from app.auth import routes as auth_routes
from core.services.storage_service import PUBLIC_PREFIX, StorageService
from lib.mongo_client import MongoClient, MongoClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: create upload/export directories, ensure MongoDB indexes
    - Shutdown: close the MongoDB client
    """
    # Startup
    logger.info(f"Starting Hare Krishna Vidya CMS API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    StorageService.ensure_dirs()
    Path(settings.EXPORT_DIR).mkdir(parents=True, exist_ok=True)

    try:
        MongoClient.ensure_indexes()
    except MongoClientError as e:
        logger.error(f"Index setup failed: {e.message}")

    if not settings.razorpay_configured:
        logger.warning("Razorpay keys not set; donation checkout will return 503")
    if not settings.email_configured:
        logger.warning("Email not configured; receipts and notifications will not be sent")

    yield

    # Shutdown
    logger.info("Shutting down Hare Krishna Vidya CMS API")
    MongoClient.close()


# Create FastAPI application
app = FastAPI(
    title="Hare Krishna Vidya CMS API",
    description="""
## Content & Donation API

Backend for the Hare Krishna Vidya website and its admin console.

### Public

- **Campaigns** - fundraising campaigns with progress and pledges
- **Donations** - seva checkout through Razorpay with emailed receipts
- **Donor Wall** - donors grouped by tier
- **Galleries** - photos and videos
- **Grocery Kits** - pick grocery packs and donate them
- **Forms** - dynamic forms with conditional fields and server-side validation
- **Careers** - job applications with a PDF CV

### Admin

Endpoints that change content, or expose donor details, need a bearer
token from `POST /api/users/login`.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Admin accounts and access tokens"},
        {"name": "Campaigns", "description": "Fundraising campaigns"},
        {"name": "Donations", "description": "Seva donations, payments and receipts"},
        {"name": "Donor Wall", "description": "Donor recognition by tier"},
        {"name": "Photo Gallery", "description": "Photo uploads and listings"},
        {"name": "Video Gallery", "description": "Video links and listings"},
        {"name": "Grocery", "description": "Grocery kit catalogue and donations"},
        {"name": "Forms", "description": "Dynamic forms and submissions"},
        {"name": "Careers", "description": "Job applications"},
        {"name": "Uploads", "description": "Generic image uploads"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(CMSException)
async def handle_cms_exception(request: Request, exc: CMSException):
    """Handle custom CMS exceptions."""
    return await cms_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies and parameters."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Admin accounts (router carries its own /users prefix)
app.include_router(auth_routes.router, prefix="/api")

app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(campaigns.router, prefix="/api/campaigns", tags=["Campaigns"])
app.include_router(donations.router, prefix="/api/donations", tags=["Donations"])
app.include_router(donor_wall.router, prefix="/api/donor-wall", tags=["Donor Wall"])
app.include_router(photo_gallery.router, prefix="/api/photo-gallery", tags=["Photo Gallery"])
app.include_router(video_gallery.router, prefix="/api/video-gallery", tags=["Video Gallery"])
app.include_router(grocery.router, prefix="/api/grocery", tags=["Grocery"])
app.include_router(forms.router, prefix="/api/forms", tags=["Forms"])
app.include_router(careers.router, prefix="/api/career", tags=["Careers"])
app.include_router(uploads.router, prefix="/api/uploads", tags=["Uploads"])

# Uploaded files (gallery images, campaign images, CVs)
app.mount(
    PUBLIC_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Hare Krishna Vidya CMS API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }
