"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from datetime import datetime
from urllib.parse import urlparse

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

import src.api.endpoints.products as products_module
from src.api.dependencies import api_key_protection
from src.api.endpoints.products import products_api
from src.catalog.lifecycle import ProductLifecycleCoordinator
from src.integrations.contracts.interfaces import PaymentCatalogClient
from src.utils.config_loader import MarketplaceConfig, load_marketplace_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Marketplace Products API",
    description="Products with payment catalog sync, ownership index and access policy",
    version="1.0.0",
    dependencies=[Depends(api_key_protection)],  # protect everything by default
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

config = load_marketplace_config()


def build_store(cfg: MarketplaceConfig):
    """Real Postgres when configured, else the in-memory stub."""
    if cfg.database.url and cfg.database.use_postgres:
        from src.database.postgres_real import PostgresDB

        return PostgresDB(connection_string=cfg.database.url)

    from src.database.postgres import PostgresDB

    return PostgresDB()


def build_catalog_client(cfg: MarketplaceConfig) -> PaymentCatalogClient:
    """The one place where mock vs real payment catalog is chosen."""
    if cfg.use_real_catalog():
        from src.integrations.clients.real_http.stripe_catalog import StripeCatalogClient

        return StripeCatalogClient(
            api_key=cfg.stripe.secret_key,
            max_network_retries=cfg.stripe.max_network_retries,
        )

    from src.integrations.clients.mocks.payment_catalog import MockPaymentCatalogClient

    logger.info("No Stripe credentials configured; using mock payment catalog")
    return MockPaymentCatalogClient()


postgres_db = build_store(config)
catalog_client = build_catalog_client(config)
coordinator = ProductLifecycleCoordinator(postgres_db, catalog_client, currency=config.stripe.currency)

products_module.store = postgres_db
products_module.coordinator = coordinator

# Register products API router
app.include_router(products_api, prefix="/api/v1/products", tags=["Products"])


# ============================================================================
# ENDPOINTS
# ============================================================================
@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {"service": "Marketplace Products API", "status": "healthy", "version": "1.0.0", "timestamp": datetime.now().isoformat()}


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "database": type(postgres_db).__module__,
        "payment_catalog": type(catalog_client).__name__,
        "timestamp": datetime.now().isoformat(),
    }


# ============================================================================
# STARTUP/SHUTDOWN EVENTS
# ============================================================================
@app.on_event("startup")
async def startup_event():
    """Initialize on startup"""
    logger.info("Starting Marketplace Products API...")

    # Log sanitized DB target details (no credentials) for connectivity debugging.
    if config.database.url:
        try:
            parsed = urlparse(config.database.url)
            logger.info(
                "DATABASE_URL target: scheme=%s host=%s db=%s use_postgres=%s",
                parsed.scheme,
                parsed.hostname,
                (parsed.path or "").lstrip("/"),
                config.database.use_postgres,
            )
        except Exception as e:
            logger.warning("Could not parse DATABASE_URL for startup logging: %s", e)
    else:
        logger.info("DATABASE_URL not set; using in-memory PostgresDB stub")

    # Create database tables if they don't exist
    try:
        postgres_db.create_tables()
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Error initializing database: {str(e)}")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Marketplace Products API...")
