"""Core app configuration, Firebase bootstrap, security and route guards."""

from app.core.config import get_settings, settings
from app.core.firebase import get_firestore

__all__ = ["get_settings", "settings", "get_firestore"]
