import threading
import logging
from typing import Dict, List, Optional, Protocol

from .types import JobState, normalize_job_name
from .errors import JobNotFoundError

logger = logging.getLogger(__name__)

class JobResolver(Protocol):
    """Anything that can look a job up by name. Returns None when it does not exist."""
    def get_job(self, name: str) -> Optional[JobState]:
        ...

class JobRegistry:
    def __init__(self):
        self._lock = threading.Lock()
        self._running: Dict[str, bool] = {} # job name -> running

    def register(self, name: str, running: bool = False) -> JobState:
        name = normalize_job_name(name)
        with self._lock:
            self._running.setdefault(name, running)
            state = JobState(name=name, running=self._running[name])
        logger.info(f"Registered job {name}")
        return state

    def get_job(self, name: str) -> Optional[JobState]:
        name = (name or "").strip()
        with self._lock:
            if name not in self._running:
                return None
            return JobState(name=name, running=self._running[name])

    def set_running(self, name: str, running: bool) -> JobState:
        name = (name or "").strip()
        with self._lock:
            if name not in self._running:
                raise JobNotFoundError(name)
            self._running[name] = running
        logger.info(f"Job {name} is now {'running' if running else 'idle'}")
        return JobState(name=name, running=running)

    def job_names(self) -> List[str]:
        with self._lock:
            return sorted(self._running)

    def snapshot(self) -> List[JobState]:
        with self._lock:
            return [JobState(name=n, running=r) for n, r in sorted(self._running.items())]
