"""
user_api/main.py

Purpose: Application entry point

- Builds the FastAPI app from injected settings (create_app)
- Configures logging and exception handlers
- Registers API routes (users)
- Manages application lifecycle (MongoDB connect/close)
- run() hands the constructed app to uvicorn
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import time

from user_api.api import users
from user_api.core.config import Settings, load_settings, validate_settings
from user_api.core.errors import add_exception_handlers
from user_api.core.exceptions import StoreUnavailableError
from user_api.core.logging import setup_logging, get_logger
from user_api.db.mongo import MongoConnection
from user_api.services.user_service import MongoUserRepository, UserRepository

logger = get_logger(__name__)

VERSION = "1.0.0"
SLOW_REQUEST_SECONDS = 5.0


def build_lifespan(settings: Settings, repository: Optional[UserRepository]):
    """
    Returns the lifespan handler for one app instance.

    An injected repository is used as-is; otherwise a MongoDB connection
    is opened on startup and the Mongo-backed repository installed.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Starting User API...")

        if repository is not None:
            app.state.user_repository = repository
            app.state.mongo = None
            logger.info("Using injected user repository")
        else:
            mongo = MongoConnection(settings)
            app.state.mongo = mongo

            logger.info("Connecting to MongoDB...")
            connected = await mongo.connect()

            user_repository = MongoUserRepository(mongo.get_users_collection())
            app.state.user_repository = user_repository

            if connected:
                try:
                    await user_repository.ensure_indexes()
                except StoreUnavailableError as e:
                    if settings.STRICT_STARTUP:
                        raise
                    logger.warning(f"⚠️ Index creation failed, retrying on first write: {e.error}")
            else:
                logger.warning("⚠️ Starting without a database connection; indexes will be created on first write")

        logger.info(f"🎉 User API started (environment={settings.ENVIRONMENT})")

        yield

        logger.info("🛑 Shutting down User API...")
        if app.state.mongo is not None:
            await app.state.mongo.close()
        logger.info("👋 User API shut down")

    return lifespan


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[UserRepository] = None,
) -> FastAPI:
    """
    Builds a fully wired application instance.

    Args:
        settings: Configuration; read from the environment when omitted
        repository: Store to use instead of MongoDB (tests, tooling)

    Returns:
        FastAPI app ready to be served
    """
    settings = settings or load_settings()
    validate_settings(settings)
    setup_logging(settings)

    app = FastAPI(
        title="User API",
        description="CRUD service for users stored in MongoDB",
        version=VERSION,
        lifespan=build_lifespan(settings, repository),
        debug=settings.DEBUG,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings
    if repository is not None:
        app.state.user_repository = repository

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to all responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        if process_time > SLOW_REQUEST_SECONDS:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path}",
                extra={"process_time": process_time}
            )

        return response

    add_exception_handlers(app, settings)

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint - service info and endpoint map."""
        return {
            "success": True,
            "message": "Welcome to the User REST API",
            "version": VERSION,
            "endpoints": {
                "GET /users": "Get all users",
                "GET /users/:id": "Get user by ID",
                "POST /users": "Create a new user",
                "PUT /users/:id": "Update user by ID",
                "DELETE /users/:id": "Delete user by ID"
            }
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """
        Reports database connectivity.
        Returns 503 when MongoDB does not answer a ping.
        """
        health_status = {
            "success": True,
            "status": "healthy",
            "timestamp": time.time(),
            "environment": settings.ENVIRONMENT,
            "version": VERSION,
            "checks": {}
        }

        mongo = getattr(request.app.state, "mongo", None)
        if mongo is None:
            health_status["checks"]["database"] = "not_checked"
        elif await mongo.check_health():
            health_status["checks"]["database"] = "healthy"
        else:
            health_status["checks"]["database"] = "unhealthy"
            health_status["status"] = "degraded"
            health_status["success"] = False

        status_code = 200 if health_status["status"] == "healthy" else 503
        return JSONResponse(content=health_status, status_code=status_code)

    app.include_router(users.router, tags=["Users"])

    return app


def run():
    """Console entry point: build the app and serve it with uvicorn."""
    import uvicorn

    settings = load_settings()
    app = create_app(settings)

    logger.info(f"Server is running on http://localhost:{settings.PORT}")
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
