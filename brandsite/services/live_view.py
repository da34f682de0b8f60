"""Live views: a fetched listing kept fresh by change notifications.

A view moves ``IDLE -> LOADING -> READY | FAILED``; a change event or a
filter change moves it back to ``LOADING``; ``unmount()`` closes it for good
and releases its subscription before returning.

Each fetch takes a generation number and only the latest generation may
touch view state, so a slow response for a superseded filter is dropped.
"""

import asyncio
import logging
import uuid
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Set, Type, TypeVar

from pydantic import BaseModel

from brandsite.schemas.post import CategoryResponse, PostResponse
from brandsite.schemas.product import ProductResponse
from brandsite.schemas.service import ServiceResponse
from brandsite.services.content import (
    POST_TABLES,
    PRODUCT_TABLES,
    SERVICE_TABLES,
    ContentService,
    Payload,
)
from brandsite.services.realtime import Subscription

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOAD_ERROR_MESSAGE = "No se pudieron cargar los datos. Por favor, intenta más tarde."


class ViewState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


Listener = Callable[["LiveView"], None]


class LiveView(Generic[T]):
    """
    Base class for a listing that re-fetches whenever its tables change.

    Subclasses set ``tables`` and ``schema`` and implement ``fetch()``.
    """

    tables: Sequence[str] = ()
    schema: Optional[Type[BaseModel]] = None
    error_message = LOAD_ERROR_MESSAGE

    def __init__(self, content: ContentService, *, channel_id: Optional[str] = None):
        self.content = content
        self.channel_id = channel_id or f"{type(self).__name__}:{uuid.uuid4().hex}"
        self.state = ViewState.IDLE
        self.data: List[T] = []
        self.error: Optional[str] = None
        self.last_exception: Optional[BaseException] = None
        self.filters: Dict[str, Any] = {}
        self._loaded = False
        self._generation = 0
        self._subscription: Optional[Subscription] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tasks: Set[asyncio.Task] = set()
        self._listeners: List[Listener] = []

    # ----- Data -----
    async def fetch(self) -> Any:
        raise NotImplementedError

    def apply(self, result: Any) -> None:
        """Store a fetch result. Runs only for the latest generation."""
        self.data = result

    # ----- Lifecycle -----
    @property
    def closed(self) -> bool:
        return self.state is ViewState.CLOSED

    async def mount(self) -> None:
        """Subscribe to the view's tables and run the initial fetch."""
        if self.state is not ViewState.IDLE:
            raise RuntimeError(f"{type(self).__name__} already mounted")
        self._loop = asyncio.get_running_loop()
        self._subscription = self.content.gateway.subscribe(
            self.channel_id, self.tables, self._on_change
        )
        await self.refresh()

    def unmount(self) -> None:
        """Release the subscription. In-flight fetches finish but are ignored."""
        if self._subscription is not None:
            self._subscription.release()
            self._subscription = None
        self.state = ViewState.CLOSED
        self._listeners.clear()

    async def set_filter(self, **params) -> None:
        """Change filter parameters and re-fetch; None removes a filter."""
        for key, value in params.items():
            if value is None:
                self.filters.pop(key, None)
            else:
                self.filters[key] = value
        await self.refresh()

    async def refresh(self) -> None:
        """Fetch and apply, unless a newer fetch was requested meanwhile."""
        if self.closed:
            return
        self._generation += 1
        generation = self._generation
        self.state = ViewState.LOADING

        try:
            result = await self.fetch()
        except Exception as e:
            if self._is_stale(generation):
                logger.debug(f"{self.channel_id}: dropped failure of superseded fetch #{generation}")
                return
            self.last_exception = e
            if self._loaded:
                # Background refresh: keep showing what we had
                logger.warning(f"{self.channel_id}: refresh failed, keeping previous data: {e}")
                self.state = ViewState.READY
            else:
                logger.error(f"{self.channel_id}: fetch failed: {e}")
                self.error = self.error_message
                self.state = ViewState.FAILED
            self._emit()
            return

        if self._is_stale(generation):
            logger.debug(f"{self.channel_id}: dropped result of superseded fetch #{generation}")
            return
        self.apply(result)
        self._loaded = True
        self.error = None
        self.last_exception = None
        self.state = ViewState.READY
        self._emit()

    def _is_stale(self, generation: int) -> bool:
        return self.closed or generation != self._generation

    def _on_change(self) -> None:
        # May be called from a commit on another thread; hop onto our loop
        if self.closed or self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._schedule_refresh)

    def _schedule_refresh(self) -> None:
        if self.closed:
            return
        task = asyncio.ensure_future(self.refresh())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def settle(self) -> None:
        """Wait for every refresh scheduled by change notifications so far."""
        await asyncio.sleep(0)
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
            await asyncio.sleep(0)

    # ----- Listeners -----
    def add_listener(self, listener: Listener) -> None:
        """Call `listener(view)` after every settled transition."""
        self._listeners.append(listener)

    def _emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"{self.channel_id}: listener failed: {e}")

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the current state."""
        items = self.data
        if self.schema is not None:
            items = [self.schema.model_validate(item).model_dump(mode="json") for item in self.data]
        return {"state": self.state.value, "items": items, "error": self.error}


class BlogListView(LiveView[PostResponse]):
    """Published posts plus the category list, filterable by ``category_id``."""

    tables = POST_TABLES
    schema = PostResponse

    def __init__(self, content: ContentService, **kwargs):
        super().__init__(content, **kwargs)
        self.categories: List[Any] = []

    async def fetch(self):
        categories = await self.content.list_categories()
        posts = await self.content.list_posts(category_id=self.filters.get("category_id"))
        return categories, posts

    def apply(self, result) -> None:
        self.categories, self.data = result

    def snapshot(self) -> Dict[str, Any]:
        snapshot = super().snapshot()
        snapshot["categories"] = [
            CategoryResponse.model_validate(category).model_dump(mode="json")
            for category in self.categories
        ]
        snapshot["category_id"] = self.filters.get("category_id")
        return snapshot


class ProductListView(LiveView[Any]):
    """Published products, newest first."""

    tables = PRODUCT_TABLES
    schema = ProductResponse

    async def fetch(self):
        return await self.content.list_products()


class ServiceListView(LiveView[Any]):
    """Services in their configured order."""

    tables = SERVICE_TABLES
    schema = ServiceResponse

    async def fetch(self):
        return await self.content.list_services()

    async def retry(self) -> None:
        """Explicit retry offered to the user after a failed load."""
        await self.refresh()


class ProductManagerView(LiveView[Any]):
    """
    Admin listing of every product.

    Writes go to the database first; local rows change only from the
    confirmed result, and any failure falls back to a full re-fetch.
    """

    tables = PRODUCT_TABLES
    schema = ProductResponse

    async def fetch(self):
        return await self.content.list_products(published_only=False)

    async def toggle_publish(self, product_id: int):
        try:
            current = await self.content.get_product(product_id)
            updated = await self.content.set_product_published(product_id, not current.published)
        except Exception:
            await self.refresh()
            raise
        self.data = [updated if product.id == product_id else product for product in self.data]
        self._emit()
        return updated

    async def delete(self, product_id: int) -> None:
        try:
            await self.content.delete_product(product_id)
        except Exception:
            await self.refresh()
            raise
        self.data = [product for product in self.data if product.id != product_id]
        self._emit()

    async def save(self, payload: Payload, product_id: Optional[int] = None):
        """Create or update from the editor form, then reload the listing."""
        if product_id is None:
            product = await self.content.create_product(payload)
        else:
            product = await self.content.update_product(product_id, payload)
        await self.refresh()
        return product


VIEWS: Dict[str, Type[LiveView]] = {
    "posts": BlogListView,
    "products": ProductListView,
    "services": ServiceListView,
}
