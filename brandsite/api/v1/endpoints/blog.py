"""Public blog endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from brandsite.api.deps import get_content
from brandsite.schemas.post import (
    CategoryListResponse,
    CategoryResponse,
    PostListResponse,
    PostResponse,
)
from brandsite.services.content import ContentService

router = APIRouter(
    prefix="/blog",
    tags=["Blog"],
)


@router.get(
    "/posts",
    response_model=PostListResponse,
    status_code=status.HTTP_200_OK,
    summary="List published posts",
    description="""
    Published posts, newest first, each with its categories.

    Pass `category_id` to keep only posts in that category.
    """,
)
async def list_posts(
    category_id: Optional[int] = Query(None, gt=0, description="Only posts in this category"),
    content: ContentService = Depends(get_content),
) -> PostListResponse:
    posts = await content.list_posts(category_id=category_id)
    return PostListResponse(posts=posts, total=len(posts))


@router.get(
    "/posts/{slug}",
    response_model=PostResponse,
    status_code=status.HTTP_200_OK,
    summary="Get published post by slug",
)
async def get_post(
    slug: str,
    content: ContentService = Depends(get_content),
) -> PostResponse:
    return await content.get_post_by_slug(slug)


@router.get(
    "/categories",
    response_model=CategoryListResponse,
    status_code=status.HTTP_200_OK,
    summary="List categories",
    description="All blog categories ordered by name.",
)
async def list_categories(
    content: ContentService = Depends(get_content),
) -> CategoryListResponse:
    categories = await content.list_categories()
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(category) for category in categories]
    )
