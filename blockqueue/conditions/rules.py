from abc import ABC, abstractmethod
from ..types import BlockDecision, QueuedItem

class BlockQueueCondition(ABC):
    """
    Abstract base class for all block conditions.
    """

    @abstractmethod
    def is_blocked(self, item: QueuedItem) -> BlockDecision:
        """
        Determines if the queued 'item' must wait.
        Returns a blocking decision with a reason, or an allowing one.
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this condition."""
        pass
