"""Dashboard and orders placeholder."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.auth import require_identity
from app.schemas.auth import Identity
from app.schemas.dashboard import DashboardResponse, FeatureCard, OrdersResponse

router = APIRouter()

FEATURE_CARDS = (
    FeatureCard(
        title="Válvulas",
        description="Explore nuestra gama de válvulas para optimizar su sistema de riego.",
        href="/productos?categoria=valvula",
        cta="Ver Válvulas",
    ),
    FeatureCard(
        title="Racores",
        description="Conectores y accesorios esenciales para una instalación eficiente.",
        href="/productos?categoria=racor",
        cta="Ver Racores",
    ),
    FeatureCard(
        title="Caudalímetros",
        description="Mida y controle el flujo de agua con precisión en sus sistemas.",
        href="/productos?categoria=caudalimetro",
        cta="Ver Caudalímetros",
    ),
)

ORDER_STATUSES = ["Procesando", "Enviado", "Entregado", "Cancelado"]


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    _identity: Annotated[Identity, Depends(require_identity("/"))],
) -> DashboardResponse:
    """Shortcuts into the catalog by category."""
    return DashboardResponse(
        greeting="Bienvenido a Bluefitt Connect",
        feature_cards=list(FEATURE_CARDS),
        blog_teaser="Contenido del blog próximamente...",
    )


@router.get("/orders", response_model=OrdersResponse)
def get_orders(
    _identity: Annotated[Identity, Depends(require_identity("/pedidos"))],
) -> OrdersResponse:
    """Order history. There is no order data yet."""
    return OrdersResponse(orders=[], statuses=ORDER_STATUSES)
