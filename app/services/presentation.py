"""View helpers for the catalog filters and the admin user table."""

import unicodedata

from app.schemas.product import Product

# Catalog categories offered by the product filter: value -> label.
PRODUCT_CATEGORIES: dict[str, str] = {
    "valvula": "Válvula",
    "racor": "Racor",
    "caudalimetro": "Caudalímetro",
    "codo corto": "Codo corto",
}


def fold(text: str) -> str:
    """Lower-case and strip accents so "Válvula" matches "valvula"."""
    decomposed = unicodedata.normalize("NFKD", text.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def parse_category_param(value: str | None) -> list[str]:
    """Split the ?categoria=a,b query parameter into folded, de-duplicated keys."""
    if not value:
        return []
    keys: list[str] = []
    for part in value.split(","):
        key = fold(part)
        if key and key not in keys:
            keys.append(key)
    return keys


def filter_products(
    products: list[Product],
    search: str | None = None,
    categories: list[str] | None = None,
) -> list[Product]:
    """
    Keep active products matching the search term and any selected category.

    Search looks at name, code and description; categories compare folded.
    """
    term = fold(search) if search else ""
    selected = {fold(c) for c in categories or [] if c.strip()}
    result = []
    for product in products:
        if not product.is_active:
            continue
        if term and not any(
            term in fold(field) for field in (product.name, product.code, product.description)
        ):
            continue
        if selected and fold(product.category) not in selected:
            continue
        result.append(product)
    return result


def user_initials(display_name: str | None, email: str | None) -> str:
    if display_name and display_name.strip():
        parts = display_name.split()
        if len(parts) > 1:
            return f"{parts[0][0]}{parts[-1][0]}".upper()
        return parts[0][:2].upper()
    if email:
        return email[:2].upper()
    return "U"


def role_label(role: str) -> str:
    return role[:1].upper() + role[1:] if role else ""
