"""
Lifeline Backend - FastAPI Application

Blood donation coordination API: accounts, runtime collection provisioning
and administrator-defined record types.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from lifeline.config import get_settings
from lifeline.core.logging_config import configure_logging
from lifeline.database.connections import close_connections, get_database, ping_database
from lifeline.database.provisioner import CollectionProvisioner
from lifeline.database.registry import ensure_required_collections, create_indexes
from lifeline.routers import auth, collections, dynamic_models, health
from lifeline.services.auth_service import AuthService
from lifeline.services.model_registry import ModelRegistry

logger = logging.getLogger("lifeline")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Build the collection provisioner and model registry
    - Ensure required collections and indexes
    - Seed the bootstrap administrator if configured

    Shutdown:
    - Close all database connections
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting up Lifeline Backend...")

    db = await get_database()
    app.state.provisioner = CollectionProvisioner(db)
    app.state.model_registry = ModelRegistry()

    if await ping_database(db):
        try:
            await ensure_required_collections(app.state.provisioner)
            await create_indexes(db)
            if settings.admin_email and settings.admin_password:
                await AuthService(db).ensure_admin(settings.admin_email, settings.admin_password)
        except PyMongoError as e:
            logger.warning("Database initialization warning: %s", e)
        else:
            logger.info("Database collections provisioned and indexes created")
    else:
        logger.warning("Skipping startup provisioning, collections will be created on first use")

    yield

    logger.info("Shutting down Lifeline Backend...")
    await close_connections()
    logger.info("Database connections closed")


app = FastAPI(
    title="Lifeline API",
    description="""
## Blood Donation Coordination API

### Features
- **Authentication**: JWT-based auth for donors, recipients and administrators
- **Collections**: Provision MongoDB collections on demand (admin)
- **Dynamic Models**: Define new record types at runtime from field maps (admin)

### Authentication
Protected endpoints take the JWT as a bearer token (or a `token` query parameter):
```
Authorization: Bearer your_jwt_token
```

Obtain a token via `POST /api/auth/login`.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(collections.router)
app.include_router(dynamic_models.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Lifeline API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
