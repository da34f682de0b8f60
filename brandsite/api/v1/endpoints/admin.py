"""Admin endpoints for managing posts, categories, products and services.

Access control is enforced by the database's row-level security and the
deployment in front of this API, not here.
"""

from fastapi import APIRouter, Depends, Response, status

from brandsite.api.deps import get_content
from brandsite.schemas.post import (
    CategoryCreate,
    CategoryResponse,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostUpdate,
    PublishUpdate,
)
from brandsite.schemas.product import (
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from brandsite.schemas.service import ServiceCreate, ServiceResponse, ServiceUpdate
from brandsite.services.content import ContentService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
)


# ----- Posts -----
@router.get(
    "/posts",
    response_model=PostListResponse,
    summary="List all posts",
    description="Every post, published or not, newest first.",
)
async def list_posts(content: ContentService = Depends(get_content)) -> PostListResponse:
    posts = await content.list_posts(published_only=False)
    return PostListResponse(posts=posts, total=len(posts))


@router.post(
    "/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
)
async def create_post(
    post_in: PostCreate,
    content: ContentService = Depends(get_content),
) -> PostResponse:
    return await content.create_post(post_in)


@router.put("/posts/{post_id}", response_model=PostResponse, summary="Update post")
async def update_post(
    post_id: int,
    post_in: PostUpdate,
    content: ContentService = Depends(get_content),
) -> PostResponse:
    return await content.update_post(post_id, post_in)


@router.patch("/posts/{post_id}/publish", response_model=PostResponse, summary="Publish or unpublish post")
async def publish_post(
    post_id: int,
    publish_in: PublishUpdate,
    content: ContentService = Depends(get_content),
) -> PostResponse:
    return await content.set_post_published(post_id, publish_in.published)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete post")
async def delete_post(post_id: int, content: ContentService = Depends(get_content)) -> Response:
    await content.delete_post(post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----- Categories -----
@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
)
async def create_category(
    category_in: CategoryCreate,
    content: ContentService = Depends(get_content),
) -> CategoryResponse:
    return CategoryResponse.model_validate(await content.create_category(category_in))


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete category")
async def delete_category(category_id: int, content: ContentService = Depends(get_content)) -> Response:
    await content.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----- Products -----
@router.get(
    "/products",
    response_model=ProductListResponse,
    summary="List all products",
    description="Every product, published or not, newest first.",
)
async def list_products(content: ContentService = Depends(get_content)) -> ProductListResponse:
    products = await content.list_products(published_only=False)
    return ProductListResponse(
        products=[ProductResponse.model_validate(product) for product in products],
        total=len(products),
    )


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create product",
    description="""
    Create a product. `image_url` is required, and at least one of
    `ebook_url` / `physical_url` must be given.
    """,
)
async def create_product(
    product_in: ProductCreate,
    content: ContentService = Depends(get_content),
) -> ProductResponse:
    return ProductResponse.model_validate(await content.create_product(product_in))


@router.put("/products/{product_id}", response_model=ProductResponse, summary="Update product")
async def update_product(
    product_id: int,
    product_in: ProductUpdate,
    content: ContentService = Depends(get_content),
) -> ProductResponse:
    return ProductResponse.model_validate(await content.update_product(product_id, product_in))


@router.patch(
    "/products/{product_id}/publish",
    response_model=ProductResponse,
    summary="Publish or unpublish product",
)
async def publish_product(
    product_id: int,
    publish_in: PublishUpdate,
    content: ContentService = Depends(get_content),
) -> ProductResponse:
    product = await content.set_product_published(product_id, publish_in.published)
    return ProductResponse.model_validate(product)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete product")
async def delete_product(product_id: int, content: ContentService = Depends(get_content)) -> Response:
    await content.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----- Services -----
@router.post(
    "/services",
    response_model=ServiceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create service",
)
async def create_service(
    service_in: ServiceCreate,
    content: ContentService = Depends(get_content),
) -> ServiceResponse:
    return ServiceResponse.model_validate(await content.create_service(service_in))


@router.put("/services/{service_id}", response_model=ServiceResponse, summary="Update service")
async def update_service(
    service_id: int,
    service_in: ServiceUpdate,
    content: ContentService = Depends(get_content),
) -> ServiceResponse:
    return ServiceResponse.model_validate(await content.update_service(service_id, service_in))


@router.delete("/services/{service_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete service")
async def delete_service(service_id: int, content: ContentService = Depends(get_content)) -> Response:
    await content.delete_service(service_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
