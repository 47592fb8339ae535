"""Firebase bootstrap: admin SDK app and Firestore client, or None handles in degraded mode."""

import logging
from typing import TYPE_CHECKING, NamedTuple

import firebase_admin
from firebase_admin import credentials, firestore
from starlette.requests import Request

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Collection names; Firestore has no schema so these are the single source of truth.
COLLECTION_PRODUCTS = "products"
COLLECTION_USERS = "users"


class FirebaseHandles(NamedTuple):
    """Initialized admin SDK app and Firestore client. Both None when Firebase is disabled."""

    app: "firebase_admin.App | None"
    firestore: "firestore.Client | None"

    @property
    def enabled(self) -> bool:
        return self.app is not None and self.firestore is not None


DISABLED = FirebaseHandles(app=None, firestore=None)


def _build_credential(settings: "Settings") -> credentials.Base:
    if settings.FIREBASE_CREDENTIALS_PATH:
        return credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
    return credentials.ApplicationDefault()


def init_firebase(settings: "Settings") -> FirebaseHandles:
    """
    Initialize the admin SDK from settings.

    Returns DISABLED when required settings are missing or initialization fails;
    the rest of the app treats that as "backend features off" rather than crashing.
    """
    missing = settings.missing_firebase_settings
    if missing:
        logger.error(
            "Firebase configuration is incomplete (missing %s). "
            "Authentication and Firestore features will be disabled.",
            ", ".join(missing),
        )
        return DISABLED

    options = {"projectId": settings.FIREBASE_PROJECT_ID}
    if settings.FIREBASE_STORAGE_BUCKET:
        options["storageBucket"] = settings.FIREBASE_STORAGE_BUCKET

    try:
        try:
            app = firebase_admin.get_app()
        except ValueError:
            app = firebase_admin.initialize_app(_build_credential(settings), options)
        client = firestore.client(app=app)
    except (ValueError, OSError) as e:
        logger.error("Firebase initialization failed: %s", e)
        return DISABLED

    logger.info("Firebase initialized for project %s", settings.FIREBASE_PROJECT_ID)
    return FirebaseHandles(app=app, firestore=client)


def close_firebase(handles: FirebaseHandles) -> None:
    """Release the admin SDK app created by init_firebase."""
    if handles.app is None:
        return
    try:
        firebase_admin.delete_app(handles.app)
    except ValueError:
        logger.warning("Firebase app was already deleted")


def get_firebase(request: Request) -> FirebaseHandles:
    """Dependency: the handles created in the application lifespan."""
    return getattr(request.app.state, "firebase", DISABLED)


def get_firestore(request: Request) -> "firestore.Client | None":
    """Dependency that yields the Firestore client, or None when Firebase is disabled."""
    return get_firebase(request).firestore
