"""Pydantic schemas for catalog products as read from Firestore."""

from datetime import datetime

from pydantic import BaseModel, Field


class DimensionDataItem(BaseModel):
    """One structured dimension entry, e.g. label "Diámetro", value "DN50"."""

    label: str
    value: str


class Product(BaseModel):
    """Canonical product record. Built by app.services.normalize.parse_product."""

    id: str = Field(..., description="Firestore document id (the product code).")
    code: str = Field(default="", description="Product SKU or internal code.")
    gtin13: str | None = Field(default=None, description="EAN/UPC.")
    name: str = Field(default="", description="Primary display name.")
    title: str | None = None
    measure: str | None = Field(default=None, description='Unit or size, e.g. "DN25", "1/2\\"".')
    seo_title: str | None = None
    description: str = ""
    category: str = ""
    brand: str | None = None
    dimension_image: str | None = Field(default=None, description="URL of the dimension diagram.")
    dimension_data: list[DimensionDataItem] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list, description="Primary image URLs.")
    images_related: list[str] = Field(default_factory=list, description="Related image URLs.")
    price: int | None = Field(default=None, description="Price in minor currency units (cents).")
    stock: int | None = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime
    ai_hint: str | None = None


class ProductListResponse(BaseModel):
    """Response for GET /products."""

    products: list[Product]
    total: int
    categories: list[str] = Field(
        default_factory=list, description="Lower-cased category filter applied, if any."
    )
    view: str = "grid"
