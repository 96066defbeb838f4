"""Execution contexts for gateway calls and their callbacks."""

import asyncio
import threading
from collections.abc import Callable, Coroutine
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class CallbackDispatcher(Protocol):
    """Delivers results onto the caller's primary execution context."""

    def deliver(self, callback: Callable[..., None], *args: object) -> None:
        """Schedule ``callback(*args)`` on the primary context."""


@dataclass
class LoopDispatcher(CallbackDispatcher):
    """Hands callbacks to the primary event loop from any thread."""

    loop: asyncio.AbstractEventLoop

    def deliver(self, callback: Callable[..., None], *args: object) -> None:
        self.loop.call_soon_threadsafe(callback, *args)


class BackgroundRunner:
    """Event loop on a daemon thread that runs gateway operations.

    Every submitted coroutine becomes its own task; nothing is queued or
    limited, so a burst of calls turns into the same number of concurrent
    requests.
    """

    def __init__(self, name: str = "story-gateway-worker") -> None:
        self.name = name
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "BackgroundRunner":
        """Start the worker thread if it is not running yet."""
        if self.running:
            return self
        loop = asyncio.new_event_loop()
        thread = threading.Thread(
            target=self._run_loop, args=(loop,), name=self.name, daemon=True
        )
        self._loop = loop
        self._thread = thread
        thread.start()
        return self

    def submit(self, coro: Coroutine[Any, Any, T]) -> "Future[T]":
        """Schedule a coroutine on the worker loop."""
        if self._loop is None or not self.running:
            coro.close()
            raise RuntimeError("Background runner is not running")
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the worker loop and wait for its thread to exit."""
        loop, thread = self._loop, self._thread
        if loop is None or thread is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout)
        self._loop = None
        self._thread = None

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        try:
            loop.run_forever()
        finally:
            loop.close()
