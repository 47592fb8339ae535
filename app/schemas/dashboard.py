"""Schemas for the dashboard and the orders placeholder."""

from pydantic import BaseModel


class FeatureCard(BaseModel):
    """Dashboard shortcut into a filtered product list."""

    title: str
    description: str
    href: str
    cta: str


class DashboardResponse(BaseModel):
    """Response for GET /dashboard."""

    greeting: str
    feature_cards: list[FeatureCard]
    blog_teaser: str


class Order(BaseModel):
    """Order row. No order data exists yet; kept for the response shape."""

    id: str
    placed_on: str
    total: str
    status: str
    item_count: int


class OrdersResponse(BaseModel):
    """Response for GET /orders."""

    orders: list[Order]
    statuses: list[str]
