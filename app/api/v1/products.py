"""Product catalog: filtered list and detail."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.v1.auth import require_identity
from app.core.firebase import get_firestore
from app.schemas.auth import Identity
from app.schemas.product import Product, ProductListResponse
from app.services.catalog import fetch_product_by_id, fetch_products
from app.services.presentation import filter_products, parse_category_param

router = APIRouter()


@router.get("", response_model=ProductListResponse)
def list_products(
    _identity: Annotated[Identity, Depends(require_identity("/productos"))],
    db: Annotated[object, Depends(get_firestore)],
    categoria: Annotated[str | None, Query(description="Comma-separated categories")] = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
    view: Annotated[Literal["grid", "list"], Query()] = "grid",
) -> ProductListResponse:
    """
    Active products ordered by name.

    Categories and the search term are applied to the fetched list with accents
    folded, so a stored "válvula" matches ?categoria=valvula.
    """
    categories = parse_category_param(categoria)
    result = fetch_products(db)
    if result.error:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error)
    products = filter_products(result.data, search=search, categories=categories)
    return ProductListResponse(
        products=products,
        total=len(products),
        categories=categories,
        view=view,
    )


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: str,
    _identity: Annotated[Identity, Depends(require_identity("/productos"))],
    db: Annotated[object, Depends(get_firestore)],
) -> Product:
    """Product detail. 404 when the product does not exist."""
    result = fetch_product_by_id(db, product_id)
    if result.error:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error)
    if result.product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado.")
    return result.product
