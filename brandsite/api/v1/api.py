"""API v1 router aggregator."""

from fastapi import APIRouter

from brandsite.api.v1.endpoints import admin, blog, products, realtime, services

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(blog.router)
api_router.include_router(products.router)
api_router.include_router(services.router)
api_router.include_router(admin.router)
api_router.include_router(realtime.router)

__all__ = ["api_router"]
