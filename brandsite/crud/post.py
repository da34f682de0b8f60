"""CRUD operations for Post and Category."""

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from brandsite.core.exceptions import NotFoundError, ValidationError
from brandsite.core.slug import estimate_reading_time, slugify
from brandsite.crud.base import CRUDBase
from brandsite.models.post import Category, Post, PostCategory
from brandsite.schemas.post import (
    CategoryCreate,
    CategoryResponse,
    PostCreate,
    PostResponse,
    PostUpdate,
)


def validate_post(data: Dict[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    """
    Check a post payload and derive slug and reading time.

    With ``partial`` only the fields present in `data` are checked.

    Raises:
        ValidationError: missing title or content.
    """
    for field, message in (
        ("title", "El título es requerido"),
        ("content", "El contenido es requerido"),
    ):
        if (not partial or field in data) and not (data.get(field) or "").strip():
            raise ValidationError(message)

    cleaned = dict(data)
    if "title" in cleaned:
        cleaned["title"] = cleaned["title"].strip()
        cleaned["slug"] = slugify(cleaned["title"])
        if not cleaned["slug"]:
            raise ValidationError("El título debe contener letras o números")
    if "content" in cleaned and not cleaned.get("reading_time"):
        cleaned["reading_time"] = estimate_reading_time(cleaned["content"])
    return cleaned


def flatten_categories(links: Iterable[PostCategory]) -> List[Category]:
    """Categories referenced by join rows, in join order, deduplicated, dangling rows dropped."""
    seen = set()
    categories = []
    for link in links:
        category = link.category
        if category is None or category.id in seen:
            continue
        seen.add(category.id)
        categories.append(category)
    return categories


def shape_post(post: Post) -> PostResponse:
    """Post row with its join rows flattened into a category list."""
    return PostResponse(
        id=post.id,
        title=post.title,
        slug=post.slug,
        excerpt=post.excerpt,
        content=post.content,
        cover_image=post.cover_image,
        published=post.published,
        reading_time=post.reading_time,
        created_at=post.created_at,
        categories=[
            CategoryResponse.model_validate(category)
            for category in flatten_categories(post.category_links)
        ],
    )


class CRUDPost(CRUDBase[Post, PostCreate, PostUpdate]):
    """CRUD operations for Post."""

    order_by = (desc(Post.created_at), desc(Post.id))
    not_found_detail = "Post no encontrado"

    async def get_multi_filtered(
        self,
        db: AsyncSession,
        *,
        published_only: bool = True,
        category_id: Optional[int] = None,
    ) -> List[Post]:
        """
        Posts newest first, optionally narrowed to one category.

        The category filter is a semi-join on the join table, so each
        returned post still carries all of its categories.
        """
        stmt = select(Post)
        if published_only:
            stmt = stmt.where(Post.published.is_(True))
        if category_id is not None:
            in_category = (
                select(PostCategory.post_id)
                .join(Category, Category.id == PostCategory.category_id)
                .where(Category.id == category_id)
            )
            stmt = stmt.where(Post.id.in_(in_category))
        stmt = stmt.order_by(*self.order_by)
        return list((await db.scalars(stmt)).all())

    async def get_by_slug(
        self,
        db: AsyncSession,
        *,
        slug: str,
        published_only: bool = True,
    ) -> Post:
        """Single post by slug. Raises NotFoundError when absent or unpublished."""
        stmt = select(Post).where(Post.slug == slug)
        if published_only:
            stmt = stmt.where(Post.published.is_(True))
        post = (await db.scalars(stmt.limit(1))).first()
        if post is None:
            raise NotFoundError(self.not_found_detail)
        return post

    async def reload(self, db: AsyncSession, id: int) -> Post:
        """Fresh copy of a post with its categories, bypassing the identity map."""
        db.expunge_all()
        return await self.get_or_raise(db, id)

    async def _set_categories(self, db: AsyncSession, post: Post, category_ids: Iterable[int]) -> None:
        wanted = list(dict.fromkeys(category_ids))
        if wanted:
            found = set((await db.scalars(select(Category.id).where(Category.id.in_(wanted)))).all())
            missing = [cid for cid in wanted if cid not in found]
            if missing:
                raise NotFoundError(f"Categoría no encontrada: {missing[0]}")

        # Keep surviving rows so the (post_id, category_id) constraint never sees a re-insert
        current = {link.category_id: link for link in post.category_links}
        post.category_links = [
            current.get(cid) or PostCategory(category_id=cid) for cid in wanted
        ]

    async def create_post(self, db: AsyncSession, *, data: Dict[str, Any], category_ids: Iterable[int] = ()) -> Post:
        """Insert a validated post and its join rows."""
        post = Post(**data)
        post.category_links = []
        await self._set_categories(db, post, category_ids)
        db.add(post)
        await db.commit()
        return await self.reload(db, post.id)

    async def update_post(
        self,
        db: AsyncSession,
        *,
        post: Post,
        data: Dict[str, Any],
        category_ids: Optional[Iterable[int]] = None,
    ) -> Post:
        """Apply validated fields; replace the category set when ids are given."""
        for field, value in data.items():
            setattr(post, field, value)
        if category_ids is not None:
            await self._set_categories(db, post, category_ids)
        await db.commit()
        return await self.reload(db, post.id)


class CRUDCategory(CRUDBase[Category, CategoryCreate, CategoryCreate]):
    """CRUD operations for Category."""

    order_by = (Category.name.asc(),)
    not_found_detail = "Categoría no encontrada"


def validate_category(data: Dict[str, Any]) -> Dict[str, str]:
    """Require a name and derive the slug from it."""
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("El nombre es requerido")
    slug = slugify(name)
    if not slug:
        raise ValidationError("El nombre debe contener letras o números")
    return {"name": name, "slug": slug}


# Singleton instances
crud_post = CRUDPost(Post)
crud_category = CRUDCategory(Category)
