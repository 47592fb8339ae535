"""Read-only catalog queries: active products by category and a product by id."""

import logging
from typing import TYPE_CHECKING, Generic, TypeVar

from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1.base_query import FieldFilter
from pydantic import BaseModel

from app.core.firebase import COLLECTION_PRODUCTS
from app.schemas.product import Product
from app.services.normalize import parse_product

if TYPE_CHECKING:
    from google.cloud.firestore import Client

logger = logging.getLogger(__name__)

FIRESTORE_NOT_CONFIGURED = "Firestore no está configurado."

T = TypeVar("T")


class FetchResult(BaseModel, Generic[T]):
    """Outcome of a single read: the data, a loading flag and an error message."""

    data: T
    loading: bool = False
    error: str | None = None


class ProductByIdResult(BaseModel):
    """Outcome of a product lookup. product is None both when not found and on error."""

    product: Product | None = None
    loading: bool = False
    error: str | None = None


def fetch_products(db: "Client | None", category: str | None = None) -> FetchResult[list[Product]]:
    """
    List active products ordered by name, optionally restricted to one category.

    Categories are stored lower-cased by the importer, so the filter is lower-cased too.
    """
    if db is None:
        return FetchResult[list[Product]](data=[], error=FIRESTORE_NOT_CONFIGURED)
    try:
        query = db.collection(COLLECTION_PRODUCTS).where(
            filter=FieldFilter("isActive", "==", True)
        )
        if category and category.strip():
            query = query.where(filter=FieldFilter("category", "==", category.strip().lower()))
        query = query.order_by("name")
        products = [parse_product(snap.id, snap.to_dict()) for snap in query.stream()]
    except GoogleAPIError as e:
        logger.exception("Error fetching products (category=%s)", category)
        return FetchResult[list[Product]](data=[], error=str(e) or "Error al cargar los productos.")
    return FetchResult[list[Product]](data=products)


def fetch_product_by_id(db: "Client | None", product_id: str | None) -> ProductByIdResult:
    """Read products/{product_id}. A missing id or document is not an error."""
    if not product_id:
        return ProductByIdResult()
    if db is None:
        return ProductByIdResult(error=FIRESTORE_NOT_CONFIGURED)
    try:
        snap = db.collection(COLLECTION_PRODUCTS).document(product_id).get()
    except GoogleAPIError as e:
        logger.exception("Error fetching product %s", product_id)
        return ProductByIdResult(error=str(e) or "Error al cargar el producto.")
    if not snap.exists:
        return ProductByIdResult()
    return ProductByIdResult(product=parse_product(snap.id, snap.to_dict()))
