"""Blog list, detail and the new-article form."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.v1.auth import get_current_identity, require_identity
from app.schemas.auth import Identity
from app.schemas.blog import BlogListResponse, BlogPost, BlogPostAccepted, BlogPostCreate
from app.services import blog

router = APIRouter()


@router.get("", response_model=BlogListResponse)
def list_posts(
    identity: Annotated[Identity | None, Depends(get_current_identity)],
) -> BlogListResponse:
    """Articles; can_create tells whether the caller may write one."""
    return BlogListResponse(posts=blog.list_posts(), can_create=identity is not None)


@router.get("/{slug}", response_model=BlogPost)
def get_post(
    slug: str,
    _identity: Annotated[Identity, Depends(require_identity("/blog"))],
) -> BlogPost:
    post = blog.get_post(slug)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Artículo no encontrado.")
    return post


@router.post("", response_model=BlogPostAccepted, status_code=202)
def create_post(
    body: BlogPostCreate,
    _identity: Annotated[Identity, Depends(require_identity("/blog/nuevo"))],
) -> BlogPostAccepted:
    """Validate a new article. Articles are not stored yet."""
    return blog.submit_post(body)
