from typing import List, Tuple
import logging
from .rules import BlockQueueCondition
from ..types import BlockDecision, QueuedItem

logger = logging.getLogger(__name__)

class BlockQueueManager:
    def __init__(self):
        self._conditions: List[BlockQueueCondition] = []

    @property
    def conditions(self) -> Tuple[BlockQueueCondition, ...]:
        return tuple(self._conditions)

    def add_condition(self, condition: BlockQueueCondition):
        self._conditions.append(condition)
        logger.info(f"Added block condition: {condition.name}")

    def clear(self):
        self._conditions.clear()

    def is_blocked(self, item: QueuedItem) -> BlockDecision:
        """
        Checks an item against ALL registered conditions.
        The first condition that blocks decides; otherwise the item may start.
        """
        for condition in list(self._conditions):
            decision = condition.is_blocked(item)
            if decision.blocked:
                logger.debug(f"Item {item.item_id} blocked by condition: {condition.name}")
                return decision
        return BlockDecision.allow()
