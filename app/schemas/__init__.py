"""Pydantic request/response schemas."""

from app.schemas.auth import Identity, LoginRequest, RegisterRequest, SessionResponse
from app.schemas.blog import BlogPost, BlogPostCreate
from app.schemas.health import HealthResponse
from app.schemas.product import DimensionDataItem, Product
from app.schemas.user import AppUser, UserRole

__all__ = [
    "AppUser",
    "BlogPost",
    "BlogPostCreate",
    "DimensionDataItem",
    "HealthResponse",
    "Identity",
    "LoginRequest",
    "Product",
    "RegisterRequest",
    "SessionResponse",
    "UserRole",
]
