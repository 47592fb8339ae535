"""User profile documents: admin listing, role changes, profile updates and removal."""

import logging
from typing import TYPE_CHECKING

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1.base_query import FieldFilter

from app.core.firebase import COLLECTION_USERS
from app.schemas.user import AppUser
from app.services.catalog import FIRESTORE_NOT_CONFIGURED, FetchResult
from app.services.normalize import parse_app_user

if TYPE_CHECKING:
    from google.cloud.firestore import Client, CollectionReference, Transaction

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
DEFAULT_ROLE = "user"

ORPHANED_CREDENTIAL_NOTICE = (
    "Se eliminó el perfil del usuario. Su cuenta de autenticación sigue existiendo "
    "y debe eliminarse desde un servicio con privilegios de administrador."
)
STORE_UNAVAILABLE = "No se pudo acceder a los datos del usuario. Inténtalo de nuevo más tarde."


class FirestoreNotConfiguredError(Exception):
    """Raised when a write is attempted while Firestore is disabled."""

    def __init__(self, message: str = FIRESTORE_NOT_CONFIGURED) -> None:
        self.message = message
        super().__init__(message)


class UserStoreError(Exception):
    """Raised when a users/{uid} read or write fails in Firestore."""

    def __init__(self, message: str = STORE_UNAVAILABLE) -> None:
        self.message = message
        super().__init__(message)


class UserNotFoundError(Exception):
    """Raised when users/{uid} does not exist."""

    def __init__(self, uid: str) -> None:
        self.uid = uid
        self.message = f"El usuario {uid} no existe."
        super().__init__(self.message)


class RoleChangeRejected(Exception):
    """Raised when a role change would leave the platform without an administrator."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _require_db(db: "Client | None") -> "Client":
    if db is None:
        raise FirestoreNotConfiguredError()
    return db


def fetch_users(db: "Client | None") -> FetchResult[list[AppUser]]:
    """List every profile, newest first."""
    if db is None:
        return FetchResult[list[AppUser]](data=[], error=FIRESTORE_NOT_CONFIGURED)
    try:
        query = db.collection(COLLECTION_USERS).order_by(
            "createdAt", direction=firestore.Query.DESCENDING
        )
        users = [parse_app_user(snap.id, snap.to_dict()) for snap in query.stream()]
    except GoogleAPIError:
        logger.exception("Error fetching users")
        return FetchResult[list[AppUser]](data=[], error="Error al cargar los usuarios.")
    return FetchResult[list[AppUser]](data=users)


def get_user_profile(db: "Client | None", uid: str) -> AppUser | None:
    """Return the profile for uid, or None when it does not exist."""
    ref = _require_db(db).collection(COLLECTION_USERS).document(uid)
    try:
        snap = ref.get()
    except GoogleAPIError as e:
        logger.exception("Error reading profile uid=%s", uid)
        raise UserStoreError() from e
    if not snap.exists:
        return None
    return parse_app_user(snap.id, snap.to_dict())


def create_user_profile(
    db: "Client | None",
    uid: str,
    email: str | None,
    display_name: str | None = None,
) -> AppUser:
    """Create users/{uid} with the default role."""
    doc = {
        "email": email,
        "displayName": display_name,
        "role": DEFAULT_ROLE,
        "createdAt": firestore.SERVER_TIMESTAMP,
    }
    try:
        _require_db(db).collection(COLLECTION_USERS).document(uid).set(doc)
    except GoogleAPIError as e:
        logger.exception("Error creating profile uid=%s", uid)
        raise UserStoreError() from e
    logger.info("Created profile for uid=%s", uid)
    return parse_app_user(uid, {**doc, "createdAt": None})


def update_user_profile(
    db: "Client | None",
    uid: str,
    display_name: str,
    company: str | None,
) -> None:
    """Merge display name and company into users/{uid}."""
    ref = _require_db(db).collection(COLLECTION_USERS).document(uid)
    try:
        ref.set({"displayName": display_name, "company": company or ""}, merge=True)
    except GoogleAPIError as e:
        logger.exception("Error updating profile uid=%s", uid)
        raise UserStoreError("No se pudo guardar tu perfil. Inténtalo de nuevo más tarde.") from e


def validate_role_change(actor_uid: str, target: AppUser, new_role: str, admin_count: int) -> None:
    """
    Reject role changes that would remove administrator access.

    An admin cannot demote themself, and the last remaining admin keeps the role.
    """
    if target.role != ADMIN_ROLE or new_role == ADMIN_ROLE:
        return
    if target.uid == actor_uid:
        raise RoleChangeRejected("No puede quitarse a sí mismo el rol de administrador.")
    if admin_count <= 1:
        raise RoleChangeRejected("No se puede cambiar el rol del último administrador.")


def _apply_role_change(
    transaction: "Transaction",
    users_ref: "CollectionReference",
    actor_uid: str,
    uid: str,
    new_role: str,
) -> AppUser:
    """Read the target and the admin set inside transaction, validate, then stage the update."""
    ref = users_ref.document(uid)
    snap = ref.get(transaction=transaction)
    if not snap.exists:
        raise UserNotFoundError(uid)
    target = parse_app_user(snap.id, snap.to_dict())
    if target.role == new_role:
        return target
    admins = users_ref.where(filter=FieldFilter("role", "==", ADMIN_ROLE)).get(transaction=transaction)
    validate_role_change(actor_uid, target, new_role, len(admins))
    transaction.update(ref, {"role": new_role})
    return target.model_copy(update={"role": new_role})


def change_user_role(db: "Client | None", actor_uid: str, uid: str, new_role: str) -> AppUser:
    """
    Validate and apply a role change in one transaction.

    Concurrent changes that would each leave one admin are serialized by Firestore;
    the retried transaction sees the other's write and is rejected. Nothing is
    written when validation fails.
    """
    client = _require_db(db)
    apply = firestore.transactional(_apply_role_change)
    try:
        updated = apply(client.transaction(), client.collection(COLLECTION_USERS), actor_uid, uid, new_role)
    except GoogleAPIError as e:
        logger.exception("Error changing role of uid=%s", uid)
        raise UserStoreError() from e
    logger.info("Role of uid=%s set to %s by %s", uid, updated.role, actor_uid)
    return updated


def delete_user_profile(db: "Client | None", uid: str) -> None:
    """
    Delete users/{uid}.

    Only the profile document is removed; the authentication identity stays, since
    deleting another user's credential needs a privileged backend call.
    """
    ref = _require_db(db).collection(COLLECTION_USERS).document(uid)
    try:
        if not ref.get().exists:
            raise UserNotFoundError(uid)
        ref.delete()
    except GoogleAPIError as e:
        logger.exception("Error deleting profile uid=%s", uid)
        raise UserStoreError() from e
    logger.warning("Deleted profile of uid=%s; its authentication identity was kept", uid)
