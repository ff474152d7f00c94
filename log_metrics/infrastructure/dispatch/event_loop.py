"""Background event loop - runs metric submissions off the ingesting thread.

Log lines arrive on whatever thread the logging framework calls us from.
Submissions are coroutines, so they are handed to an asyncio loop that runs
forever in a daemon thread; the caller gets a concurrent future back and
returns immediately.
"""
import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Coroutine, Optional

logger = logging.getLogger(__name__)

DEFAULT_THREAD_NAME = "metrics-dispatch"


class BackgroundEventLoop:
    """An asyncio loop living in its own daemon thread.

    - submit() is thread-safe and never blocks on I/O
    - Completion callbacks run on the loop thread
    - stop() cancels whatever is still in flight
    """

    def __init__(self, thread_name: str = DEFAULT_THREAD_NAME):
        self._thread_name = thread_name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        """Start the loop thread. Does nothing if it is already running."""
        with self._lock:
            if self.is_running:
                return

            loop = asyncio.new_event_loop()
            ready = threading.Event()
            thread = threading.Thread(
                target=self._run_loop,
                args=(loop, ready),
                daemon=True,
                name=self._thread_name,
            )
            thread.start()
            ready.wait()
            self._loop = loop
            self._thread = thread
        logger.info(f"🚀 Started dispatch loop thread={self._thread_name}")

    def submit(self, coro: Coroutine[Any, Any, Any]) -> concurrent.futures.Future:
        """Schedule a coroutine on the loop, starting the loop if needed."""
        if not self.is_running:
            self.start()
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def run(self, coro: Coroutine[Any, Any, Any], timeout: Optional[float] = None) -> Any:
        """Run a coroutine on the loop and wait for its result."""
        return self.submit(coro).result(timeout)

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the loop, cancelling tasks that have not finished."""
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = None
            self._thread = None

        if loop is None or thread is None:
            return

        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=timeout)
        logger.info(f"🛑 Stopped dispatch loop thread={self._thread_name}")

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop, ready: threading.Event) -> None:
        asyncio.set_event_loop(loop)
        loop.call_soon(ready.set)
        try:
            loop.run_forever()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.close()
