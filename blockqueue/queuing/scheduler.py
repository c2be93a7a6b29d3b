import asyncio
import logging
from collections import deque
from typing import Awaitable, Callable, Dict, Deque, List, Optional

from ..types import QueuedItem
from ..registry import JobRegistry
from ..logging_json import DecisionLogger
from ..errors import QueueItemNotFoundError
from ..conditions.manager import BlockQueueManager

logger = logging.getLogger(__name__)

Executor = Callable[[QueuedItem], Awaitable[None]]

class Scheduler:
    def __init__(self,
                 manager: BlockQueueManager,
                 registry: JobRegistry,
                 decision_logger: Optional[DecisionLogger] = None,
                 poll_interval_seconds: float = 5.0,
                 executor: Optional[Executor] = None):
        self.manager = manager
        self.registry = registry
        self.decision_logger = decision_logger
        self.poll_interval_seconds = poll_interval_seconds
        self.executor = executor

        self.items: Dict[str, QueuedItem] = {} # item_id -> QueuedItem, every item ever seen
        self.pending: Deque[QueuedItem] = deque() # Waiting for admission, FIFO
        self.active: Dict[str, QueuedItem] = {} # Released and not yet completed

        self.processing_task: Optional[asyncio.Task] = None
        self._shutdown_event = asyncio.Event()
        self._job_complete_event = asyncio.Event()
        self._new_job_event = asyncio.Event()

    async def enqueue(self, item: QueuedItem) -> QueuedItem:
        self.items[item.item_id] = item
        self.pending.append(item)
        logger.info(f"Item {item.item_id} enqueued for {item.job_name}")

        # Wake up processor
        self._new_job_event.set()

        # Ensure processor is running
        if not self.processing_task or self.processing_task.done():
            self._shutdown_event.clear()
            self.processing_task = asyncio.create_task(self.run_process_loop())
        return item

    async def run_process_loop(self):
        logger.info("Scheduler loop started.")
        while not self._shutdown_event.is_set():
            # Clear events so we can wait on them later
            self._new_job_event.clear()
            self._job_complete_event.clear()

            await self.schedule_pending()

            if not self.pending and not self.active:
                logger.debug("Scheduler idling, waiting for items...")
            # Blocked items are re-checked on the poll cadence even if nothing else happens
            waiters = [
                asyncio.create_task(self._new_job_event.wait()),
                asyncio.create_task(self._job_complete_event.wait()),
                asyncio.create_task(self._shutdown_event.wait()),
            ]
            try:
                await asyncio.wait(waiters, timeout=self.poll_interval_seconds,
                                   return_when=asyncio.FIRST_COMPLETED)
            finally:
                for waiter in waiters:
                    waiter.cancel()
        logger.info("Scheduler loop stopped.")

    async def schedule_pending(self) -> int:
        """
        Asks the block conditions about every waiting item, oldest first.
        Returns number of items released.
        """
        started = 0

        for item in list(self.pending):
            decision = self.manager.is_blocked(item)

            if decision.blocked:
                if item.status != "blocked" or item.why != decision.reason:
                    self._log_decision(item, blocked=True, reason=decision.reason)
                item.status = "blocked"
                item.why = decision.reason
                continue

            # Released. Later items in this pass see this job as running.
            # The registry goes first so a failure leaves the item waiting.
            self.registry.register(item.job_name)
            self.registry.set_running(item.job_name, True)
            self.pending.remove(item)
            item.status = "running"
            item.why = None
            self.active[item.item_id] = item
            self._log_decision(item, blocked=False, reason=None)
            started += 1

            if self.executor is not None:
                asyncio.create_task(self._execute(item))

        return started

    async def _execute(self, item: QueuedItem):
        try:
            await self.executor(item)
        except Exception as e:
            logger.error(f"Item {item.item_id} execution failed: {e}", exc_info=True)
        finally:
            if item.item_id in self.active:
                self.complete(item.item_id)

    def complete(self, item_id: str) -> QueuedItem:
        item = self.active.get(item_id)
        if item is None:
            raise QueueItemNotFoundError(item_id)

        # The job stays running while another of its items is still active
        if not any(other.job_name == item.job_name for other_id, other in self.active.items() if other_id != item_id):
            self.registry.set_running(item.job_name, False)
        del self.active[item_id]
        item.status = "completed"
        logger.info(f"Item {item_id} completed")

        # Signal completion to loop
        self._job_complete_event.set()
        return item

    def get_item(self, item_id: str) -> QueuedItem:
        item = self.items.get(item_id)
        if item is None:
            raise QueueItemNotFoundError(item_id)
        return item

    def list_items(self) -> List[QueuedItem]:
        return sorted(self.items.values(), key=lambda i: i.created_at)

    async def shutdown(self):
        self._shutdown_event.set()
        if self.processing_task and not self.processing_task.done():
            await self.processing_task
        self.processing_task = None

    def _log_decision(self, item: QueuedItem, blocked: bool, reason: Optional[str]):
        if self.decision_logger is None:
            return
        self.decision_logger.log_decision(item.item_id, {
            "item_id": item.item_id,
            "job": item.job_name,
            "parameters": item.parameter_list(),
            "blocked": blocked,
            "reason": reason,
        })
