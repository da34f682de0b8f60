"""Tests for live views: lifecycle, change-driven refresh and stale responses."""

import asyncio

import pytest

from brandsite.core.exceptions import NotFoundError, TransientError
from brandsite.services.live_view import (
    LOAD_ERROR_MESSAGE,
    BlogListView,
    ProductListView,
    ProductManagerView,
    ServiceListView,
    ViewState,
)
from brandsite.services.realtime import ChangeFeed

from conftest import seed_posts, seed_products


class FakeContent:
    """
    Content contract stand-in with controllable latency and failures.

    A ChangeFeed plays the gateway, which is all a view subscribes through.
    """

    def __init__(self):
        self.gateway = ChangeFeed()
        self.products = []
        self.services = []
        self.fail = None
        self.gates = {}
        self.calls = 0

    async def _answer(self, value):
        self.calls += 1
        if self.fail is not None:
            raise self.fail
        return value

    async def list_products(self, published_only=True):
        return await self._answer(list(self.products))

    async def list_services(self):
        return await self._answer(list(self.services))

    async def list_categories(self):
        return []

    async def list_posts(self, category_id=None, published_only=True):
        gate = self.gates.get(category_id)
        if gate is not None:
            await gate.wait()
        return await self._answer([f"post in {category_id}"])


class PlainProducts(ProductListView):
    schema = None


class PlainServices(ServiceListView):
    schema = None


class CountingProductView(ProductManagerView):
    fetches = 0

    async def fetch(self):
        self.fetches += 1
        return await super().fetch()


# ----- Lifecycle -----
def test_mount_loads_and_reaches_ready(with_content):
    async def scenario(content):
        await seed_products(content.gateway, [("Uno", True), ("Dos", False)])
        view = ProductListView(content)
        assert view.state is ViewState.IDLE

        await view.mount()

        assert view.state is ViewState.READY
        assert [p.title for p in view.data] == ["Uno"]
        snapshot = view.snapshot()
        assert snapshot["state"] == "ready"
        assert snapshot["items"][0]["title"] == "Uno"
        assert snapshot["error"] is None
        view.unmount()

    with_content(scenario)


def test_mount_twice_is_an_error():
    async def scenario():
        view = ProductListView(FakeContent())
        await view.mount()
        with pytest.raises(RuntimeError):
            await view.mount()

    asyncio.run(scenario())


def test_one_change_triggers_exactly_one_refetch(with_content):
    async def scenario(content):
        view = CountingProductView(content)
        await view.mount()
        assert view.fetches == 1

        await seed_products(content.gateway, [("A", True), ("B", True), ("C", False)])
        await view.settle()

        assert view.fetches == 2
        assert [p.title for p in view.data] == ["C", "B", "A"]
        view.unmount()

    with_content(scenario)


def test_unrelated_tables_do_not_refetch(with_content):
    async def scenario(content):
        view = CountingProductView(content)
        await view.mount()

        await seed_posts(content.gateway, [("Un post", True, ["Liderazgo"])])
        await view.settle()

        assert view.fetches == 1
        view.unmount()

    with_content(scenario)


def test_unmount_releases_the_channel(with_content):
    async def scenario(content):
        view = CountingProductView(content, channel_id="products_admin")
        await view.mount()
        assert "products_admin" in content.gateway.feed.channels

        view.unmount()

        assert view.state is ViewState.CLOSED
        assert content.gateway.feed.channels == set()
        await seed_products(content.gateway, [("Tarde", True)])
        await view.settle()
        assert view.fetches == 1
        # the same channel can be mounted again right away
        again = ProductManagerView(content, channel_id="products_admin")
        await again.mount()
        again.unmount()

    with_content(scenario)


# ----- Stale responses -----
def test_superseded_filter_response_is_discarded():
    async def scenario():
        content = FakeContent()
        view = BlogListView(content)
        await view.mount()

        slow, fast = asyncio.Event(), asyncio.Event()
        content.gates = {1: slow, 2: fast}
        first = asyncio.create_task(view.set_filter(category_id=1))
        await asyncio.sleep(0)
        second = asyncio.create_task(view.set_filter(category_id=2))
        await asyncio.sleep(0)

        fast.set()
        await second
        assert view.data == ["post in 2"]
        assert view.state is ViewState.READY

        slow.set()
        await first
        assert view.data == ["post in 2"]
        assert view.filters["category_id"] == 2

        await view.set_filter(category_id=None)
        assert view.data == ["post in None"]
        view.unmount()

    asyncio.run(scenario())


def test_response_after_unmount_is_ignored():
    async def scenario():
        content = FakeContent()
        view = BlogListView(content)
        await view.mount()

        gate = asyncio.Event()
        content.gates = {5: gate}
        pending = asyncio.create_task(view.set_filter(category_id=5))
        await asyncio.sleep(0)
        view.unmount()
        gate.set()
        await pending

        assert view.state is ViewState.CLOSED
        assert view.data == ["post in None"]

    asyncio.run(scenario())


# ----- Failures -----
def test_initial_failure_shows_error_and_retry_recovers():
    async def scenario():
        content = FakeContent()
        content.fail = TransientError("connection refused")
        view = PlainServices(content)
        snapshots = []
        view.add_listener(lambda v: snapshots.append(v.snapshot()))

        await view.mount()

        assert view.state is ViewState.FAILED
        assert view.error == LOAD_ERROR_MESSAGE
        assert view.data == []
        assert snapshots[-1]["state"] == "failed"

        content.fail = None
        content.services = ["Mentoría"]
        await view.retry()

        assert view.state is ViewState.READY
        assert view.error is None
        assert view.data == ["Mentoría"]

    asyncio.run(scenario())


def test_background_failure_keeps_previous_data():
    async def scenario():
        content = FakeContent()
        content.products = ["Libro"]
        view = PlainProducts(content)
        await view.mount()

        content.fail = TransientError("timeout")
        content.gateway.publish({"products": {"update"}})
        await view.settle()

        assert view.state is ViewState.READY
        assert view.data == ["Libro"]
        assert view.error is None
        assert isinstance(view.last_exception, TransientError)

    asyncio.run(scenario())


# ----- Admin manager -----
def test_toggle_publish_writes_then_updates_local_row(with_content):
    async def scenario(content):
        [product_id] = await seed_products(content.gateway, [("Libro", False)])
        view = CountingProductView(content)
        await view.mount()

        updated = await view.toggle_publish(product_id)

        assert updated.published is True
        assert view.data[0].published is True
        stored = await content.get_product(product_id)
        assert stored.published is True

        await view.toggle_publish(product_id)
        assert (await content.get_product(product_id)).published is False
        await view.settle()
        view.unmount()

    with_content(scenario)


def test_failed_toggle_refetches_and_reraises(with_content):
    async def scenario(content):
        await seed_products(content.gateway, [("Libro", True)])
        view = CountingProductView(content)
        await view.mount()

        with pytest.raises(NotFoundError):
            await view.toggle_publish(9999)

        assert view.fetches == 2
        assert view.state is ViewState.READY
        assert [p.title for p in view.data] == ["Libro"]
        view.unmount()

    with_content(scenario)


def test_delete_removes_row_after_confirmation(with_content):
    async def scenario(content):
        ids = await seed_products(content.gateway, [("Uno", True), ("Dos", False)])
        view = CountingProductView(content)
        await view.mount()

        await view.delete(ids[0])
        assert [p.title for p in view.data] == ["Dos"]

        with pytest.raises(NotFoundError):
            await view.delete(ids[0])
        await view.settle()
        assert [p.title for p in view.data] == ["Dos"]
        view.unmount()

    with_content(scenario)


def test_save_creates_then_reloads(with_content):
    async def scenario(content):
        view = ProductManagerView(content)
        await view.mount()

        product = await view.save({
            "title": "Nuevo libro",
            "image_url": "https://img.example.com/n.jpg",
            "physical_url": "https://shop.example.com/n",
        })
        assert [p.id for p in view.data] == [product.id]

        await view.save({"published": True}, product_id=product.id)
        assert view.data[0].published is True
        await view.settle()
        view.unmount()

    with_content(scenario)


def test_posts_view_carries_categories(with_content):
    async def scenario(content):
        categories, _ = await seed_posts(content.gateway, [
            ("Uno", True, ["Liderazgo"]),
            ("Dos", True, ["Finanzas"]),
        ])
        view = BlogListView(content)
        await view.mount()
        await view.set_filter(category_id=categories["Finanzas"])

        snapshot = view.snapshot()
        assert [c["name"] for c in snapshot["categories"]] == ["Finanzas", "Liderazgo"]
        assert [p["title"] for p in snapshot["items"]] == ["Dos"]
        view.unmount()

    with_content(scenario)
