from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

# Import database components
from app.database.database import sync_engine, Base

# Import middleware and error handlers
from app.common.middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from app.common.error_handlers import register_error_handlers

# Import routers
from app.modules.auth.router import auth_router
from app.modules.clients.router import router as clients_router
from app.modules.invoices.router import router as invoices_router

# Import models for table creation
import app.modules.auth.models
import app.modules.clients.models
import app.modules.invoices.models

from app.core.config import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Invoicing API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    # Create database tables (only for development)
    if settings.ENVIRONMENT == "development":
        Base.metadata.create_all(bind=sync_engine)

    yield

    logger.info("Invoicing API shutting down...")


# FastAPI app
app = FastAPI(
    title="Invoicing API",
    description="Clients, invoices, PDF rendering and invoice email delivery",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
    lifespan=lifespan
)

# Add middleware (order matters!)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.ENVIRONMENT == "production")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(clients_router)
app.include_router(invoices_router)


@app.get("/")
async def read_root():
    return {
        "message": "Invoicing API is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}
