"""Debounced write-back of cell edits."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

CellWriter = Callable[[str, str], Awaitable[bool]]
FailureCallback = Callable[[str, str], None]


class WriteBackQueue:
    """Coalesces edits per range and writes them once edits go quiet.

    Each ``queue_edit`` overwrites any unflushed value for the same range and
    restarts a single quiet-period timer shared by all ranges. When the timer
    fires the pending map is drained in one step and each range is written
    with its latest value. Flushes never overlap: one started while another
    is writing waits for it before draining. A write that still fails after ``retries`` extra
    attempts is dropped from pending, kept in ``failed`` and reported to
    ``on_failure``.
    """

    def __init__(
        self,
        writer: CellWriter,
        quiet_period: float = 1.0,
        retries: int = 1,
        on_failure: Optional[FailureCallback] = None,
    ):
        self._writer = writer
        self.quiet_period = quiet_period
        self.retries = max(0, retries)
        self.on_failure = on_failure
        self.failed: dict[str, str] = {}
        self._pending: dict[str, str] = {}
        self._timer: Optional[asyncio.Task] = None
        self._tasks: set[asyncio.Task] = set()
        self._flush_lock = asyncio.Lock()
        self._flushing = 0
        self._closed = False

    @property
    def pending(self) -> dict[str, str]:
        return dict(self._pending)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def is_syncing(self) -> bool:
        return self._flushing > 0

    def queue_edit(self, range_a1: str, value: str):
        """Record the latest value for ``range_a1`` and restart the quiet period.

        Must be called from within a running event loop.
        """
        if self._closed:
            raise RuntimeError("WriteBackQueue is closed")
        if range_a1 in self._pending:
            logger.debug(f"Replacing unflushed edit for {range_a1}")
        self._pending[range_a1] = value
        self._restart_timer()

    def _restart_timer(self):
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._flush_when_quiet())
        self._tasks.add(self._timer)
        self._timer.add_done_callback(self._tasks.discard)

    async def _flush_when_quiet(self):
        await asyncio.sleep(self.quiet_period)
        # Past this point new edits start a fresh timer instead of cancelling us
        self._timer = None
        await self.flush()

    async def flush(self) -> dict[str, bool]:
        """Write everything pending now. Returns success per range."""
        # A timer still sleeping would only find an empty map
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
        # Flushes run one at a time so a newer value never lands before an older one
        async with self._flush_lock:
            batch, self._pending = self._pending, {}
            if not batch:
                return {}

            logger.info(f"Syncing {len(batch)} pending cell edit(s)")
            results = {}
            self._flushing += 1
            try:
                for range_a1, value in batch.items():
                    ok = await self._write(range_a1, value)
                    results[range_a1] = ok
                    if ok:
                        self.failed.pop(range_a1, None)
                        continue
                    logger.error(f"Failed to sync {range_a1}; edit discarded")
                    self.failed[range_a1] = value
                    self._report_failure(range_a1, value)
            finally:
                self._flushing -= 1
            return results

    def _report_failure(self, range_a1: str, value: str):
        if self.on_failure is None:
            return
        try:
            self.on_failure(range_a1, value)
        except Exception as e:
            logger.error(f"Failure callback raised for {range_a1}: {e}", exc_info=True)

    async def _write(self, range_a1: str, value: str) -> bool:
        for attempt in range(self.retries + 1):
            if attempt:
                logger.warning(f"Retrying write to {range_a1} (attempt {attempt + 1})")
            try:
                if await self._writer(range_a1, value):
                    return True
            except Exception as e:
                logger.error(f"Writer raised for {range_a1}: {e}", exc_info=True)
        return False

    async def aclose(self) -> dict[str, bool]:
        """Cancel the quiet-period timer and write whatever is still pending."""
        self._closed = True
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
        # Let flushes that already started finish their writes
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        return await self.flush()
