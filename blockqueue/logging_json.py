import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Deque, Optional
from collections import deque

from .config import LoggingConfig

class JsonFormatter(logging.Formatter):
    """One JSON object per line. Decision fields go under "decision", tracebacks under "exc_info"."""
    def format(self, record):
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }
        if hasattr(record, "decision"):
            log_record["decision"] = record.decision
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        # Non-JSON values (sets, exceptions) are logged by their text form
        return json.dumps(log_record, default=str)

class DecisionLogger:
    def __init__(self, config: Optional[LoggingConfig] = None):
        self.config = config or LoggingConfig()
        self.logger = logging.getLogger("blockqueue")
        self.logger.setLevel(self.config.level)

        # Memory buffer for recent block decisions
        self.memory_buffer: Deque[Dict[str, Any]] = deque(
            maxlen=self.config.keep_last_n_decisions_in_memory
        )

    def setup_handlers(self):
        if self.logger.handlers:
            return

        log_dir = self.config.log_dir
        os.makedirs(log_dir, exist_ok=True)

        # File handler (JSONL)
        file_handler = logging.FileHandler(os.path.join(log_dir, "blockqueue.jsonl"))
        file_handler.setFormatter(JsonFormatter())
        self.logger.addHandler(file_handler)

        # Console handler (Standard)
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        self.logger.addHandler(console_handler)

    def log_decision(self, item_id: str, props: Dict[str, Any]):
        """
        Log an admission decision for a queued item.
        """
        if "timestamp" not in props:
            props["timestamp"] = datetime.now().isoformat()

        self.memory_buffer.append(props)

        # Log to file with extra properties
        self.logger.info(f"Item {item_id} {'blocked' if props.get('blocked') else 'released'}", extra={"decision": props})

    def get_recent_decisions(self) -> list[Dict[str, Any]]:
        return list(self.memory_buffer)
