"""Transform a flat JSON product feed into product documents and write them in batches."""

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError
from pydantic import BaseModel

from app.core.firebase import COLLECTION_PRODUCTS

if TYPE_CHECKING:
    from google.cloud.firestore import Client

logger = logging.getLogger(__name__)

IMAGE_DIRECTORY = "images/productImage"

# Firestore allows 500 writes per batch; stay below it.
BATCH_SIZE = 400


class ImportSummary(BaseModel):
    """Counters printed at the end of an import."""

    total: int = 0
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0

    def render(self) -> str:
        return "\n".join(
            [
                "--- Import Summary ---",
                f"Total products in JSON: {self.total}",
                f"Total products processed: {self.processed}",
                f"Successfully imported: {self.succeeded}",
                f"Failed to import/skipped: {self.failed}",
                "----------------------",
            ]
        )


def image_path(value: str) -> str:
    """Rewrite a bare filename or URL to the fixed image directory; "" for an empty value."""
    filename = value.strip().split("/")[-1]
    if not filename:
        return ""
    return f"{IMAGE_DIRECTORY}/{filename}"


def image_list(value: Any) -> list[str]:
    """Comma-joined image names -> image paths, empty entries dropped."""
    if not isinstance(value, str) or not value.strip():
        return []
    paths = (image_path(part) for part in value.split(","))
    return [p for p in paths if p]


def parse_dimension_data(value: Any) -> list[dict[str, str]]:
    """
    Parse "Label: Value, Label2: Value2" into label/value maps.

    When the first part has no colon, the parts are taken as ordered values with
    generic labels ("Dim 1", "Dim 2", ...).
    """
    if not isinstance(value, str) or not value.strip():
        return []
    parts = [p.strip() for p in value.split(",") if p.strip()]
    if not parts:
        return []
    if ":" in parts[0]:
        entries = []
        for part in parts:
            label, _, rest = part.partition(":")
            label, rest = label.strip(), rest.strip()
            if label and rest:
                entries.append({"label": label, "value": rest})
        return entries
    return [{"label": f"Dim {i}", "value": part} for i, part in enumerate(parts, start=1)]


def _text(record: Mapping[str, Any], key: str, default: str = "") -> str:
    value = record.get(key)
    if value is None or value == "":
        return default
    return str(value)


def transform_product(record: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map one feed record to a products/{code} document.

    Feed keys are kept as the feed spells them (tittle, seotittle, imagerelated).
    """
    name = _text(record, "name")
    category = _text(record, "category").lower()
    dimension_image = record.get("dimensionimage")
    return {
        "code": str(record["code"]),
        "gtin13": _text(record, "gtin13"),
        "name": name,
        "title": _text(record, "tittle", name),
        "measure": _text(record, "measure"),
        "seoTitle": _text(record, "seotittle", name),
        "description": _text(record, "description"),
        "category": category,
        "brand": _text(record, "brand"),
        "dimensionImage": image_path(dimension_image) if isinstance(dimension_image, str) else "",
        "dimensionData": parse_dimension_data(record.get("dimensiondata")),
        "images": image_list(record.get("images")),
        "imagesRelated": image_list(record.get("imagerelated")),
        "price": 0,
        "stock": 0,
        "isActive": True,
        "createdAt": firestore.SERVER_TIMESTAMP,
        "updatedAt": firestore.SERVER_TIMESTAMP,
        "aiHint": category,
    }


def import_products(
    db: "Client",
    records: Iterable[Any],
    batch_size: int = BATCH_SIZE,
) -> ImportSummary:
    """
    Stage one write per valid record and commit in batches of batch_size.

    Full batches are committed as soon as they fill and a commit failure there
    propagates. The trailing partial batch is committed at the end; if that
    commit fails its records are counted as failed.
    """
    records = list(records)
    summary = ImportSummary(total=len(records))
    collection = db.collection(COLLECTION_PRODUCTS)
    batch = db.batch()
    in_batch = 0

    for record in records:
        if not isinstance(record, Mapping) or not record.get("code"):
            name = record.get("name") if isinstance(record, Mapping) else None
            logger.warning("Skipping product without a code: %s", name or "Unnamed Product")
            summary.skipped += 1
            summary.failed += 1
            continue
        try:
            doc = transform_product(record)
        except (TypeError, ValueError, AttributeError) as e:
            logger.error("Error processing product with code %s: %s", record.get("code"), e)
            summary.skipped += 1
            summary.failed += 1
            continue

        batch.set(collection.document(doc["code"]), doc)
        in_batch += 1
        summary.processed += 1

        if in_batch >= batch_size:
            logger.info("Committing batch of %s products...", in_batch)
            batch.commit()
            summary.succeeded += in_batch
            batch = db.batch()
            in_batch = 0

    if in_batch > 0:
        logger.info("Committing final batch of %s products...", in_batch)
        try:
            batch.commit()
            summary.succeeded += in_batch
        except GoogleAPIError:
            logger.exception("Error committing final batch")
            summary.failed += in_batch

    return summary
