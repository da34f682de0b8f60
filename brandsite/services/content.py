"""Read and write contract for posts, categories, products and services.

Every write is validated locally before the gateway is touched. Reads and
idempotent writes go through the retry policy; inserts run exactly once.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel

from brandsite.crud.base import as_dict
from brandsite.crud.post import (
    crud_category,
    crud_post,
    shape_post,
    validate_category,
    validate_post,
)
from brandsite.crud.product import crud_product, validate_product
from brandsite.crud.service import crud_service, validate_service
from brandsite.models.post import Category
from brandsite.models.product import Product
from brandsite.models.service import Service
from brandsite.schemas.post import PostResponse
from brandsite.services.gateway import DataGateway

logger = logging.getLogger(__name__)

Payload = Union[BaseModel, Dict[str, Any]]

# Tables each listing depends on, used for change subscriptions
POST_TABLES = ("posts", "blog_categories", "blog_post_categories")
CATEGORY_TABLES = ("blog_categories",)
PRODUCT_TABLES = ("products",)
SERVICE_TABLES = ("services",)

POST_FIELDS = ("title", "excerpt", "content", "cover_image", "published", "reading_time")
PRODUCT_FIELDS = ("title", "description", "image_url", "ebook_url", "physical_url", "published")
SERVICE_FIELDS = ("title", "description", "content", "icon", "youtube_url", "order_index")


def _pick(payload: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    """Known fields present in `payload`; explicit None for a flag means unset."""
    picked = {field: payload[field] for field in fields if field in payload}
    if picked.get("published", False) is None:
        del picked["published"]
    return picked


def _current(obj, fields: Iterable[str]) -> Dict[str, Any]:
    return {field: getattr(obj, field) for field in fields}


class ContentService:
    """
    Query and mutation contract for every content type.

    Public reads filter on ``published``; admin reads (``published_only=False``)
    see every row.
    """

    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    # ----- Posts -----
    async def list_posts(
        self,
        *,
        category_id: Optional[int] = None,
        published_only: bool = True,
    ) -> List[PostResponse]:
        async def query(db):
            posts = await crud_post.get_multi_filtered(
                db, published_only=published_only, category_id=category_id
            )
            return [shape_post(post) for post in posts]

        return await self.gateway.run(query)

    async def get_post_by_slug(self, slug: str) -> PostResponse:
        async def query(db):
            return shape_post(await crud_post.get_by_slug(db, slug=slug))

        return await self.gateway.run(query)

    async def get_post(self, post_id: int) -> PostResponse:
        async def query(db):
            return shape_post(await crud_post.get_or_raise(db, post_id))

        return await self.gateway.run(query)

    async def create_post(self, obj_in: Payload) -> PostResponse:
        payload = as_dict(obj_in)
        category_ids = payload.get("category_ids") or []
        data = validate_post(_pick(payload, POST_FIELDS))

        async def insert(db):
            return shape_post(await crud_post.create_post(db, data=data, category_ids=category_ids))

        post = await self.gateway.run(insert, idempotent=False)
        logger.info(f"Created post id={post.id} slug={post.slug}")
        return post

    async def update_post(self, post_id: int, obj_in: Payload) -> PostResponse:
        payload = as_dict(obj_in, exclude_unset=True)
        category_ids = payload.get("category_ids")
        changes = _pick(payload, POST_FIELDS)
        validate_post(changes, partial=True)

        async def write(db):
            post = await crud_post.get_or_raise(db, post_id)
            merged = {**_current(post, POST_FIELDS), **changes}
            if "content" in changes and "reading_time" not in changes:
                merged["reading_time"] = None
            data = validate_post(merged)
            post = await crud_post.update_post(db, post=post, data=data, category_ids=category_ids)
            return shape_post(post)

        return await self.gateway.run(write)

    async def set_post_published(self, post_id: int, published: bool) -> PostResponse:
        async def write(db):
            await crud_post.set_published(db, id=post_id, published=published)
            return shape_post(await crud_post.reload(db, post_id))

        return await self.gateway.run(write)

    async def delete_post(self, post_id: int) -> None:
        await self.gateway.run(lambda db: crud_post.delete(db, id=post_id))
        logger.info(f"Deleted post id={post_id}")

    # ----- Categories -----
    async def list_categories(self) -> List[Category]:
        return await self.gateway.run(lambda db: crud_category.get_multi(db))

    async def create_category(self, obj_in: Payload) -> Category:
        data = validate_category(as_dict(obj_in))
        return await self.gateway.run(
            lambda db: crud_category.create(db, obj_in=data), idempotent=False
        )

    async def delete_category(self, category_id: int) -> None:
        await self.gateway.run(lambda db: crud_category.delete(db, id=category_id))

    # ----- Products -----
    async def list_products(self, *, published_only: bool = True) -> List[Product]:
        return await self.gateway.run(
            lambda db: crud_product.get_multi(db, published_only=published_only)
        )

    async def get_product(self, product_id: int) -> Product:
        return await self.gateway.run(lambda db: crud_product.get_or_raise(db, product_id))

    async def create_product(self, obj_in: Payload) -> Product:
        data = validate_product(_pick(as_dict(obj_in), PRODUCT_FIELDS))

        product = await self.gateway.run(
            lambda db: crud_product.create(db, obj_in=data), idempotent=False
        )
        logger.info(f"Created product id={product.id} slug={product.slug}")
        return product

    async def update_product(self, product_id: int, obj_in: Payload) -> Product:
        changes = _pick(as_dict(obj_in, exclude_unset=True), PRODUCT_FIELDS)
        validate_product(changes, partial=True)

        async def write(db):
            product = await crud_product.get_or_raise(db, product_id)
            data = validate_product({**_current(product, PRODUCT_FIELDS), **changes})
            return await crud_product.update(db, db_obj=product, obj_in=data)

        return await self.gateway.run(write)

    async def set_product_published(self, product_id: int, published: bool) -> Product:
        return await self.gateway.run(
            lambda db: crud_product.set_published(db, id=product_id, published=published)
        )

    async def delete_product(self, product_id: int) -> None:
        await self.gateway.run(lambda db: crud_product.delete(db, id=product_id))
        logger.info(f"Deleted product id={product_id}")

    # ----- Services -----
    async def list_services(self) -> List[Service]:
        return await self.gateway.run(lambda db: crud_service.get_multi(db))

    async def get_service(self, service_id: int) -> Service:
        return await self.gateway.run(lambda db: crud_service.get_or_raise(db, service_id))

    async def create_service(self, obj_in: Payload) -> Service:
        payload = _pick(as_dict(obj_in), SERVICE_FIELDS)
        if payload.get("order_index", 0) is None:
            del payload["order_index"]
        data = validate_service(payload)
        return await self.gateway.run(
            lambda db: crud_service.create(db, obj_in=data), idempotent=False
        )

    async def update_service(self, service_id: int, obj_in: Payload) -> Service:
        changes = _pick(as_dict(obj_in, exclude_unset=True), SERVICE_FIELDS)
        validate_service(changes, partial=True)

        async def write(db):
            service = await crud_service.get_or_raise(db, service_id)
            data = validate_service({**_current(service, SERVICE_FIELDS), **changes})
            return await crud_service.update(db, db_obj=service, obj_in=data)

        return await self.gateway.run(write)

    async def delete_service(self, service_id: int) -> None:
        await self.gateway.run(lambda db: crud_service.delete(db, id=service_id))
