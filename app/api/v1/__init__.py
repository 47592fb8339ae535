"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, blog, dashboard, health, products, settings

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(dashboard.router, tags=["dashboard"])
router.include_router(products.router, prefix="/products", tags=["products"])
router.include_router(blog.router, prefix="/blog", tags=["blog"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(settings.router, prefix="/settings", tags=["settings"])
