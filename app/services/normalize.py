"""Normalize raw Firestore documents to the canonical product and user records.

Stored documents come from several generations of the catalog: list fields may
be arrays or comma-joined strings, timestamps may be Firestore timestamps, ISO
strings or epoch milliseconds, and optional fields may be missing entirely.
Every function here is pure and total: it always returns a value and never
raises on a missing or malformed optional field.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from app.schemas.product import DimensionDataItem, Product
from app.schemas.user import USER_ROLES, AppUser

_DEFAULT_ROLE = "user"

# Conversion methods exposed by provider timestamp types (google.cloud, protobuf).
_TIMESTAMP_CONVERTERS = ("to_datetime", "ToDatetime")


def split_list_field(value: Any) -> list[str]:
    """
    Return a list of strings for a field that should be a list.

    Lists are kept (items coerced to str); a comma-joined string is split into
    trimmed, non-empty parts in original order; anything else is [].
    """
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return []


def to_datetime(value: Any, now: datetime | None = None) -> datetime:
    """
    Convert a stored timestamp to a timezone-aware datetime.

    Falls back to now when the value is missing or cannot be interpreted.
    """
    fallback = now or datetime.now(UTC)
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    for method in _TIMESTAMP_CONVERTERS:
        convert = getattr(value, method, None)
        if callable(convert):
            try:
                converted = convert()
            except (TypeError, ValueError, OverflowError):
                return fallback
            if isinstance(converted, datetime):
                return converted if converted.tzinfo else converted.replace(tzinfo=UTC)
            return fallback
    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return fallback
    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return fallback
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return fallback


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_dimension_data(value: Any) -> list[DimensionDataItem]:
    """Keep well-formed {label, value} entries; drop anything else."""
    if not isinstance(value, (list, tuple)):
        return []
    items: list[DimensionDataItem] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            continue
        label = entry.get("label")
        val = entry.get("value")
        if label is None or val is None:
            continue
        items.append(DimensionDataItem(label=str(label), value=str(val)))
    return items


def parse_product(doc_id: str, raw: Mapping[str, Any] | None, now: datetime | None = None) -> Product:
    """Build a Product from the raw stored shape of products/{doc_id}."""
    data = raw or {}
    is_active = data.get("isActive")
    return Product(
        id=doc_id,
        code=str(data.get("code") or doc_id),
        gtin13=_optional_str(data.get("gtin13")),
        name=str(data.get("name") or ""),
        title=_optional_str(data.get("title")),
        measure=_optional_str(data.get("measure")),
        seo_title=_optional_str(data.get("seoTitle")),
        description=str(data.get("description") or ""),
        category=str(data.get("category") or ""),
        brand=_optional_str(data.get("brand")),
        dimension_image=_optional_str(data.get("dimensionImage")),
        dimension_data=parse_dimension_data(data.get("dimensionData")),
        images=split_list_field(data.get("images")),
        images_related=split_list_field(data.get("imagesRelated")),
        price=_optional_int(data.get("price")),
        stock=_optional_int(data.get("stock")),
        is_active=is_active if isinstance(is_active, bool) else True,
        created_at=to_datetime(data.get("createdAt"), now),
        updated_at=to_datetime(data.get("updatedAt"), now),
        ai_hint=_optional_str(data.get("aiHint")),
    )


def parse_app_user(uid: str, raw: Mapping[str, Any] | None, now: datetime | None = None) -> AppUser:
    """Build an AppUser from the raw stored shape of users/{uid}. Unknown roles become 'user'."""
    data = raw or {}
    role = data.get("role")
    if role not in USER_ROLES:
        role = _DEFAULT_ROLE
    return AppUser(
        uid=uid,
        email=_optional_str(data.get("email")),
        display_name=_optional_str(data.get("displayName")),
        role=role,
        company=_optional_str(data.get("company")) or None,
        created_at=to_datetime(data.get("createdAt"), now),
        photo_url=_optional_str(data.get("photoURL")),
    )
