class BlockQueueError(Exception):
    def __init__(self, message: str, code: str = "other"):
        super().__init__(message)
        self.code = code

class ConfigError(BlockQueueError):
    def __init__(self, message: str):
        super().__init__(message, "config")

class JobNotFoundError(BlockQueueError):
    def __init__(self, job_name: str):
        super().__init__(f"Job: '{job_name}' not found", "not_found")
        self.job_name = job_name

class QueueItemNotFoundError(BlockQueueError):
    def __init__(self, item_id: str):
        super().__init__(f"Queue item {item_id} not found.", "not_found")
