import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from sqlalchemy import text

from .api.deps import get_gateway
from .api.v1.api import api_router
from .api.v1.endpoints.realtime import manager
from .config import Settings, get_settings
from .init_db import create_tables
from .services.gateway import DataGateway

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API. The data gateway lives exactly as long as the app."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        gateway = DataGateway.from_settings(settings)
        if settings.CREATE_TABLES:
            await create_tables(gateway.engine)
        app.state.gateway = gateway
        logger.info(f"{settings.API_TITLE} {settings.API_VERSION} started")
        try:
            yield
        finally:
            manager.close_all()
            await gateway.close()

    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.include_router(api_router)

    # Root endpoint
    @app.get("/")
    def read_root():
        """Hello World endpoint"""
        return {
            "message": f"Welcome to {settings.API_TITLE}",
            "version": settings.API_VERSION,
            "status": "running"
        }

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """API health check"""
        return {"status": "healthy", "live_connections": manager.count()}

    # Database test endpoint
    @app.get("/db-test")
    async def test_database(gateway: DataGateway = Depends(get_gateway)):
        """Test database connection"""
        async def ping(db):
            await db.execute(text("SELECT 1"))

        try:
            await gateway.run(ping)
            return {
                "status": "success",
                "message": "Database connection successful",
            }
        except Exception as e:
            logger.error(f"Database check failed: {e}")
            return {
                "status": "error",
                "message": str(e)
            }

    return app


app = create_app()
