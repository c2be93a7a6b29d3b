from typing import Tuple
import logging
from .rules import BlockQueueCondition
from .predicate import evaluate
from ..types import BlockDecision, BlockingConfiguration, ParameterValue, QueuedItem
from ..registry import JobResolver

logger = logging.getLogger(__name__)

class JobAndParamBlockQueueCondition(BlockQueueCondition):
    """
    Blocks an item while a specific job is running.
    When blocking params are configured, only items carrying all of them are blocked.
    """
    def __init__(self, config: BlockingConfiguration, resolver: JobResolver):
        self._config = config
        self._resolver = resolver

    @property
    def name(self) -> str:
        return f"JobAndParamBlockQueueCondition({self._config.target_name})"

    @property
    def config(self) -> BlockingConfiguration:
        return self._config

    @property
    def job_name(self) -> str:
        return self._config.target_name

    @property
    def blocking_params(self) -> Tuple[ParameterValue, ...]:
        return self._config.constraints

    def is_blocked(self, item: QueuedItem) -> BlockDecision:
        target = self._resolver.get_job(self._config.target_name)
        if target is None:
            # Unknown job never blocks
            logger.debug(f"Job {self._config.target_name} not found, not blocking {item.item_id}")
            running = False
        else:
            running = target.running

        return evaluate(self._config, running, item.parameters)
