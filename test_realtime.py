"""Tests for the change feed and the commit hooks that drive it."""

import pytest
from sqlalchemy import select

from brandsite.models import Product, Service
from brandsite.services.realtime import ChangeFeed

from conftest import seed_posts, seed_products


class Counter:
    def __init__(self):
        self.count = 0

    def __call__(self):
        self.count += 1


def test_subscribe_validates_arguments():
    feed = ChangeFeed()
    feed.subscribe("blog_changes", ["posts"], Counter())

    with pytest.raises(ValueError):
        feed.subscribe("blog_changes", ["products"], Counter())
    with pytest.raises(ValueError):
        feed.subscribe("empty", [], Counter())
    with pytest.raises(ValueError):
        feed.subscribe("bad_event", ["posts"], Counter(), event="truncate")


def test_one_notification_per_batch_per_subscription():
    feed = ChangeFeed()
    blog, products = Counter(), Counter()
    feed.subscribe("blog_changes", ["posts", "blog_categories", "blog_post_categories"], blog)
    feed.subscribe("products_changes", ["products"], products)

    notified = feed.publish({"posts": {"insert", "update"}, "blog_post_categories": {"insert"}})

    assert notified == 1
    assert blog.count == 1
    assert products.count == 0


def test_event_filter():
    feed = ChangeFeed()
    deletes = Counter()
    feed.subscribe("deletes", ["products"], deletes, event="delete")

    feed.publish({"products": {"insert"}})
    assert deletes.count == 0
    feed.publish({"products": {"update", "delete"}})
    assert deletes.count == 1


def test_release_stops_notifications_and_frees_channel():
    feed = ChangeFeed()
    counter = Counter()
    subscription = feed.subscribe("services_changes", ["services"], counter)

    subscription.release()
    subscription.release()
    feed.publish({"services": {"update"}})

    assert counter.count == 0
    assert not subscription.active
    assert feed.channels == set()
    # the channel id can be reused once released
    feed.subscribe("services_changes", ["services"], counter)


def test_failing_callback_does_not_block_other_subscribers():
    feed = ChangeFeed()
    counter = Counter()

    def broken():
        raise RuntimeError("view crashed")

    feed.subscribe("broken", ["posts"], broken)
    feed.subscribe("healthy", ["posts"], counter)

    assert feed.publish({"posts": {"insert"}}) == 1
    assert counter.count == 1


def test_commit_publishes_one_batch(with_gateway):
    async def scenario(gateway):
        products, services = Counter(), Counter()
        gateway.subscribe("products_changes", ["products"], products)
        gateway.subscribe("services_changes", ["services"], services)

        await seed_products(gateway, [("Libro uno", True), ("Libro dos", False), ("Libro tres", True)])

        assert products.count == 1
        assert services.count == 0

    with_gateway(scenario)


def test_rollback_publishes_nothing(with_gateway):
    async def scenario(gateway):
        counter = Counter()
        gateway.subscribe("services_changes", ["services"], counter)

        async with gateway.session() as db:
            db.add(Service(title="Mentoría", description="1:1"))
            await db.flush()
            await db.rollback()

        assert counter.count == 0

    with_gateway(scenario)


def test_update_and_delete_are_reported(with_gateway):
    async def scenario(gateway):
        [product_id] = await seed_products(gateway, [("Libro", False)])
        seen = []
        gateway.subscribe("updates", ["products"], lambda: seen.append("update"), event="update")
        gateway.subscribe("deletes", ["products"], lambda: seen.append("delete"), event="delete")

        async with gateway.session() as db:
            product = await db.get(Product, product_id)
            product.published = True
            await db.commit()
        assert seen == ["update"]

        async with gateway.session() as db:
            product = await db.get(Product, product_id)
            await db.delete(product)
            await db.commit()
        assert seen == ["update", "delete"]

    with_gateway(scenario)


def test_read_only_session_publishes_nothing(with_gateway):
    async def scenario(gateway):
        await seed_products(gateway, [("Libro", True)])
        counter = Counter()
        gateway.subscribe("products_changes", ["products"], counter)

        async with gateway.session() as db:
            await db.scalars(select(Product))
            await db.commit()

        assert counter.count == 0

    with_gateway(scenario)


def test_join_table_changes_reach_post_subscribers(with_gateway):
    async def scenario(gateway):
        touched = Counter()
        gateway.subscribe("join_only", ["blog_post_categories"], touched)

        await seed_posts(gateway, [("Primer post", True, ["Liderazgo"])])

        assert touched.count == 1

    with_gateway(scenario)


def test_close_releases_everything(with_gateway):
    async def scenario(gateway):
        gateway.subscribe("a", ["posts"], Counter())
        gateway.subscribe("b", ["products"], Counter())
        gateway.feed.close()
        assert gateway.feed.channels == set()

    with_gateway(scenario)
