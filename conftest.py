"""
Shared fixtures for the Brandsite tests.
Run: pytest
"""

import asyncio
from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from brandsite.init_db import create_tables
from brandsite.models import Category, Post, PostCategory, Product, Service
from brandsite.services.content import ContentService
from brandsite.services.gateway import DataGateway
from brandsite.services.retry import RetryOptions

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'brandsite-test.db'}"


async def open_gateway(db_url: str, **kwargs) -> DataGateway:
    kwargs.setdefault("retry", RetryOptions(max_retries=3, base_delay_ms=0, jitter=0))
    gateway = DataGateway(create_async_engine(db_url), **kwargs)
    await create_tables(gateway.engine)
    return gateway


@pytest.fixture
def with_gateway(db_url):
    """Run ``scenario(gateway)`` on a fresh database inside its own event loop."""
    def runner(scenario, **kwargs):
        async def main():
            gateway = await open_gateway(db_url, **kwargs)
            try:
                return await scenario(gateway)
            finally:
                await gateway.close()
        return asyncio.run(main())
    return runner


@pytest.fixture
def with_content(with_gateway):
    """Like with_gateway, but hands the scenario a ContentService."""
    def runner(scenario, **kwargs):
        return with_gateway(lambda gateway: scenario(ContentService(gateway)), **kwargs)
    return runner


async def seed_posts(gateway: DataGateway, rows):
    """
    Insert posts directly. `rows` is a list of (title, published, [categories]).
    Each post is one hour newer than the previous one.
    """
    async with gateway.session() as db:
        categories = {}
        for _, _, names in rows:
            for name in names:
                if name not in categories:
                    categories[name] = Category(name=name, slug=name.lower())
                    db.add(categories[name])
        posts = []
        for index, (title, published, names) in enumerate(rows):
            post = Post(
                title=title,
                slug=title.lower().replace(" ", "-"),
                content=f"{title} body",
                published=published,
                created_at=BASE_TIME + timedelta(hours=index),
            )
            post.category_links = [PostCategory(category=categories[name]) for name in names]
            db.add(post)
            posts.append(post)
        await db.commit()
        return {name: category.id for name, category in categories.items()}, [post.id for post in posts]


async def seed_products(gateway: DataGateway, rows):
    """Insert products directly. `rows` is a list of (title, published)."""
    async with gateway.session() as db:
        products = []
        for index, (title, published) in enumerate(rows):
            product = Product(
                title=title,
                slug=title.lower().replace(" ", "-"),
                description=f"{title} description",
                image_url=f"https://img.example.com/{index}.jpg",
                ebook_url=f"https://shop.example.com/{index}",
                published=published,
                created_at=BASE_TIME + timedelta(hours=index),
            )
            db.add(product)
            products.append(product)
        await db.commit()
        return [product.id for product in products]


async def seed_services(gateway: DataGateway, rows):
    """Insert services directly. `rows` is a list of (title, order_index)."""
    async with gateway.session() as db:
        services = [
            Service(title=title, description=f"{title} description", order_index=order)
            for title, order in rows
        ]
        db.add_all(services)
        await db.commit()
        return [service.id for service in services]
