from fastapi import FastAPI, HTTPException
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
from pydantic import BaseModel

from .types import QueuedItem
from .config import AppConfig, global_config
from .registry import JobRegistry
from .logging_json import DecisionLogger
from .errors import JobNotFoundError, QueueItemNotFoundError
from .conditions.manager import BlockQueueManager
from .conditions import descriptor
from .queuing.scheduler import Scheduler

class EnqueueRequest(BaseModel):
    job_name: str
    parameters: Any = None # [{"name": .., "value": ..}], {"name": "value"} or pairs

class RunningRequest(BaseModel):
    running: bool

def _item_view(item: QueuedItem) -> Dict[str, Any]:
    return {
        "item_id": item.item_id,
        "job_name": item.job_name,
        "parameters": item.parameter_list(),
        "status": item.status,
        "why": item.why,
    }

def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    config = config or global_config.config

    registry = JobRegistry()
    manager = BlockQueueManager()
    decision_logger = DecisionLogger(config.logging)
    scheduler = Scheduler(
        manager,
        registry,
        decision_logger=decision_logger,
        poll_interval_seconds=config.scheduling.poll_interval_seconds,
    )

    for job_name in config.jobs:
        registry.register(job_name)
    for condition_data in config.conditions:
        condition = descriptor.new_instance(condition_data, registry)
        if condition is None:
            decision_logger.logger.warning(f"Skipping condition without jobName: {condition_data}")
            continue
        manager.add_condition(condition)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        decision_logger.setup_handlers()
        decision_logger.logger.info("Starting blockqueue...")
        yield
        # Shutdown
        decision_logger.logger.info("Shutting down...")
        await scheduler.shutdown()

    app = FastAPI(title="blockqueue", lifespan=lifespan)
    app.state.registry = registry
    app.state.manager = manager
    app.state.scheduler = scheduler
    app.state.decision_logger = decision_logger

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "jobs": len(registry.job_names()),
            "conditions": [c.name for c in manager.conditions],
            "pending": len(scheduler.pending),
            "active": len(scheduler.active),
        }

    # --- Jobs ---

    @app.get("/jobs")
    async def list_jobs():
        return {"jobs": [j.model_dump() for j in registry.snapshot()]}

    @app.post("/jobs/{name}")
    async def register_job(name: str):
        try:
            state = registry.register(name)
        except ValueError as e:
            raise HTTPException(400, str(e))
        return state.model_dump()

    @app.post("/jobs/{name}/running")
    async def set_job_running(name: str, body: RunningRequest):
        try:
            state = registry.set_running(name, body.running)
        except JobNotFoundError as e:
            raise HTTPException(404, str(e))
        # Running state changed, waiting items may be released or held
        await scheduler.schedule_pending()
        return state.model_dump()

    # --- Conditions ---

    @app.get("/conditions")
    async def list_conditions():
        return {
            "display_name": descriptor.DISPLAY_NAME,
            "conditions": [
                {
                    "name": c.name,
                    "job_name": getattr(c, "job_name", None),
                    "blocking_params": [p.model_dump() for p in getattr(c, "blocking_params", ())],
                }
                for c in manager.conditions
            ],
        }

    @app.post("/conditions")
    async def add_condition(data: Dict[str, Any]):
        condition = descriptor.new_instance(data, registry)
        if condition is None:
            raise HTTPException(400, "Job must be specified")
        manager.add_condition(condition)
        await scheduler.schedule_pending()
        return {
            "status": "added",
            "name": condition.name,
            "blocking_params": [p.model_dump() for p in condition.blocking_params],
        }

    @app.get("/conditions/check-job-name")
    async def check_job_name(jobName: Optional[str] = None):
        return descriptor.check_job_name(jobName, registry).model_dump()

    @app.get("/conditions/autocomplete")
    async def autocomplete_job_name(value: Optional[str] = None):
        return {"values": descriptor.autocomplete_job_names(value, registry)}

    # --- Queue ---

    @app.post("/queue")
    async def enqueue(body: EnqueueRequest):
        try:
            item = QueuedItem(job_name=body.job_name, parameters=body.parameters)
        except ValueError as e:
            raise HTTPException(400, str(e))
        await scheduler.enqueue(item)
        await scheduler.schedule_pending()
        return _item_view(item)

    @app.get("/queue")
    async def list_queue():
        return {"items": [_item_view(i) for i in scheduler.list_items()]}

    @app.get("/queue/{item_id}")
    async def get_queue_item(item_id: str):
        try:
            return _item_view(scheduler.get_item(item_id))
        except QueueItemNotFoundError as e:
            raise HTTPException(404, str(e))

    @app.post("/queue/{item_id}/complete")
    async def complete_item(item_id: str):
        try:
            item = scheduler.complete(item_id)
        except QueueItemNotFoundError as e:
            raise HTTPException(404, str(e))
        await scheduler.schedule_pending()
        return _item_view(item)

    # --- Admin ---

    @app.get("/admin/decisions")
    async def recent_decisions(limit: int = 100):
        return {"decisions": decision_logger.get_recent_decisions()[-limit:]}

    return app
