"""Schemas for blog articles and the new-article form."""

from datetime import date

from pydantic import BaseModel, Field, HttpUrl, field_validator

# Blog categories offered by the new-article form: value -> label.
BLOG_CATEGORIES: dict[str, str] = {
    "novedades": "Novedades de Productos",
    "consejos-riego": "Consejos de Riego",
    "tecnologia-agricola": "Tecnología Agrícola",
    "casos-exito": "Casos de Éxito",
    "innovacion": "Innovación y Futuro",
}


class BlogPost(BaseModel):
    """Published article as shown in the blog list and detail views."""

    id: str
    title: str
    slug: str
    excerpt: str
    image_url: str
    published_on: date
    category: str
    author: str
    ai_hint: str = ""


class BlogListResponse(BaseModel):
    """Response for GET /blog."""

    posts: list[BlogPost]
    can_create: bool = Field(description="Whether the caller may open the new-article form.")


class BlogPostCreate(BaseModel):
    """New-article form values."""

    title: str = Field(..., min_length=5, max_length=150)
    slug: str = Field(..., min_length=3, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    category: str = Field(..., min_length=1)
    excerpt: str = Field(..., min_length=10, max_length=300)
    content: str = Field(..., min_length=50)
    image_url: HttpUrl | None = None
    author: str = Field(..., min_length=2)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        if v not in BLOG_CATEGORIES:
            raise ValueError(f"category must be one of {sorted(BLOG_CATEGORIES)}")
        return v

    @field_validator("image_url", mode="before")
    @classmethod
    def empty_image_url(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BlogPostAccepted(BaseModel):
    """Acknowledgement of a submitted article. Articles are not persisted."""

    title: str
    slug: str
    persisted: bool = False
    message: str
