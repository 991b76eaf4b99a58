import asyncio
import functools
import inspect
import logging
import threading
from typing import Any, Coroutine, TypeVar

from freshdesk_client.sources.client.freshdesk.freshdesk import FreshDeskClient
from freshdesk_client.sources.external.freshdesk.freshdesk import FreshdeskDataSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FreshDeskSync:
    """Blocking facade over FreshdeskDataSource

    Every data source coroutine is exposed under the same name as a plain
    method that blocks the calling thread until the operation completes:

        fd = FreshDeskSync(FreshDeskClient.build_with_api_key(domain, key))
        ticket = fd.get_ticket(42)

    All calls run on one background event loop, so any number of threads
    can share an instance and its rate limiter.
    """

    def __init__(self, client: FreshDeskClient) -> None:
        """Initialize with a FreshDeskClient
        Args:
            client: An initialized `FreshDeskClient` instance
        """
        self.data_source = FreshdeskDataSource(client)
        self._bg_loop = asyncio.new_event_loop()
        self._bg_loop_thread = threading.Thread(
            target=self._start_background_loop,
            daemon=True
        )
        self._bg_loop_thread.start()

    def _start_background_loop(self) -> None:
        """Start the background event loop."""
        asyncio.set_event_loop(self._bg_loop)
        self._bg_loop.run_forever()

    def _run_async(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run a coroutine from sync context on the dedicated loop."""
        future = asyncio.run_coroutine_threadsafe(coro, self._bg_loop)
        return future.result()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name == "data_source":
            raise AttributeError(name)
        attr = getattr(self.data_source, name)
        if not inspect.iscoroutinefunction(attr):
            return attr

        @functools.wraps(attr)
        def blocking(*args: Any, **kwargs: Any) -> Any:
            return self._run_async(attr(*args, **kwargs))

        return blocking

    def shutdown(self) -> None:
        """Close the HTTP client, then stop the background loop and thread."""
        if not self._bg_loop.is_running():
            return
        try:
            self._run_async(self.data_source.close())
        except Exception as exc:
            logger.warning(f"FreshDesk client close encountered an issue: {exc}")
        self._bg_loop.call_soon_threadsafe(self._bg_loop.stop)
        self._bg_loop_thread.join()
        self._bg_loop.close()

    def __enter__(self) -> "FreshDeskSync":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
