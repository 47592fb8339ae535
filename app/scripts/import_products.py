"""
Import products from a JSON feed into Firestore. Run from project root:
  python -m app.scripts.import_products SERVICE_ACCOUNT_JSON PRODUCTS_JSON
Example:
  python -m app.scripts.import_products ./serviceAccountKey.json ./products.json

PRODUCTS_JSON holds an array of flat product records (or an object with a
"products" array). Each record is written to products/{code}.
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore

from app.services.product_import import import_products

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


class FeedError(Exception):
    """Raised when the products file is missing or not a product array."""


def load_feed(path: Path) -> list[Any]:
    """Read the products file and return its list of records."""
    if not path.is_file():
        raise FeedError(f"Products JSON file not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FeedError(f"Could not parse {path}. Ensure it's valid JSON: {e!s}") from e
    if isinstance(data, dict) and "products" in data:
        data = data["products"]
    if not isinstance(data, list):
        raise FeedError(
            'Products JSON file should contain an array of products (or an object with a "products" array).'
        )
    return data


def init_firestore(service_account_path: Path) -> "firestore.Client":
    """Initialize the admin SDK from a service account key and return a Firestore client."""
    try:
        app = firebase_admin.get_app()
    except ValueError:
        app = firebase_admin.initialize_app(credentials.Certificate(str(service_account_path)))
        logger.info("Firebase Admin SDK initialized.")
    return firestore.client(app=app)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import a JSON product feed into Firestore.")
    parser.add_argument("service_account", type=Path, help="Path to the service account key JSON")
    parser.add_argument("products", type=Path, help="Path to the products JSON feed")
    args = parser.parse_args(argv)

    if not args.service_account.is_file():
        print(f"Error: Service account key file not found at {args.service_account}", file=sys.stderr)
        return 1

    print(f"Using service account: {args.service_account}")
    print(f"Using products JSON: {args.products}")

    try:
        records = load_feed(args.products)
    except FeedError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Found {len(records)} products in JSON file.")

    try:
        db = init_firestore(args.service_account)
        summary = import_products(db, records)
    except Exception as e:
        logger.exception("Unhandled error in product import: %s", e)
        return 1

    print()
    print(summary.render())
    print("Product import process finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
