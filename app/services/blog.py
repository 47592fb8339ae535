"""Blog articles. Articles are sample content; submissions are validated but not stored."""

import logging
from datetime import date

from app.schemas.blog import BLOG_CATEGORIES, BlogPost, BlogPostAccepted, BlogPostCreate

logger = logging.getLogger(__name__)

SAMPLE_POSTS: tuple[BlogPost, ...] = (
    BlogPost(
        id="1",
        title="Optimización del Riego por Goteo en Cultivos Extensivos",
        slug="riego-goteo-cultivos",
        excerpt="Descubra técnicas avanzadas para maximizar la eficiencia del riego por goteo y mejorar la producción...",
        image_url="https://picsum.photos/seed/riego-goteo/400/250",
        published_on=date(2024, 7, 28),
        category="Consejos de Riego",
        author="Ing. Agrónomo",
        ai_hint="irrigation drip",
    ),
    BlogPost(
        id="2",
        title="Nuevas Válvulas Inteligentes para el Control Remoto de Sistemas",
        slug="valvulas-inteligentes",
        excerpt="Conozca las últimas innovaciones en válvulas con conectividad para una gestión agrícola más eficiente.",
        image_url="https://picsum.photos/seed/smart-valve/400/250",
        published_on=date(2024, 7, 25),
        category="Novedades",
        author="Equipo Bluefitt",
        ai_hint="valve technology",
    ),
    BlogPost(
        id="3",
        title="La Importancia de los Caudalímetros en la Agricultura de Precisión",
        slug="caudalimetros-precision",
        excerpt="Entienda cómo los caudalímetros son clave para una agricultura sostenible y rentable.",
        image_url="https://picsum.photos/seed/flowmeter-agriculture/400/250",
        published_on=date(2024, 7, 22),
        category="Tecnología Agrícola",
        author="Dr. Riego Eficiente",
        ai_hint="meter field",
    ),
    BlogPost(
        id="4",
        title="Caso de Éxito: Aumento de Rendimiento con Racores Antifugas",
        slug="racores-antifugas-exito",
        excerpt="Un estudio de caso real que demuestra cómo la elección correcta de racores impacta positivamente.",
        image_url="https://picsum.photos/seed/fitting-success/400/250",
        published_on=date(2024, 7, 18),
        category="Casos de Éxito",
        author="AgroTestimonios",
        ai_hint="pipe connection",
    ),
)


def list_posts() -> list[BlogPost]:
    """Articles, newest first."""
    return sorted(SAMPLE_POSTS, key=lambda p: p.published_on, reverse=True)


def get_post(slug: str) -> BlogPost | None:
    return next((p for p in SAMPLE_POSTS if p.slug == slug), None)


def submit_post(post: BlogPostCreate) -> BlogPostAccepted:
    """Acknowledge a validated article; nothing is persisted."""
    logger.info(
        "Blog article submitted: slug=%s category=%s author=%s",
        post.slug,
        BLOG_CATEGORIES[post.category],
        post.author,
    )
    return BlogPostAccepted(
        title=post.title,
        slug=post.slug,
        message=f'"{post.title}" ha sido enviado con éxito. (Esto es una demo, no se guardaron datos reales).',
    )
