"""
Authoring boundary for job-and-param block conditions.

Request data arrives in the loosely-typed shape a form submits:

    {
        "jobName": "deploy",
        "defineBlockingParams": {
            "blockingParams": {"name": "env", "value": "prod"}        # single object
            # or: [{"name": "env", "value": "prod"}, {...}]           # list of objects
        }
    }

Everything here turns that shape into a BlockingConfiguration once, so conditions
only ever see well-formed, immutable configuration.
"""
from typing import Any, List, Mapping, Optional
import logging
from pydantic import BaseModel

from .builtins import JobAndParamBlockQueueCondition
from ..types import BlockingConfiguration, ParameterValue
from ..registry import JobRegistry, JobResolver

logger = logging.getLogger(__name__)

DISPLAY_NAME = "Block when a specific Job is running"

class FormValidation(BaseModel):
    kind: str = "ok" # ok, error
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "FormValidation":
        return cls()

    @classmethod
    def error(cls, message: str) -> "FormValidation":
        return cls(kind="error", message=message)

    @property
    def is_ok(self) -> bool:
        return self.kind == "ok"

def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)

def _blocking_params_entries(define_blocking_params: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    raw = define_blocking_params.get("blockingParams")
    if isinstance(raw, Mapping):
        return [raw]
    if isinstance(raw, list):
        return [entry for entry in raw if isinstance(entry, Mapping)]
    return []

def normalize_blocking_params(define_blocking_params: Optional[Mapping[str, Any]]) -> List[ParameterValue]:
    """
    Collapses the single-object or list form into an ordered list of parameters.
    Entries with a blank name or an empty value are dropped.
    """
    if not define_blocking_params:
        return []

    params = []
    for entry in _blocking_params_entries(define_blocking_params):
        name = _as_text(entry.get("name"))
        value = _as_text(entry.get("value"))
        if name.strip() and value != "":
            params.append(ParameterValue(name=name, value=value))
        else:
            logger.debug(f"Dropping blocking param with blank name or empty value: {dict(entry)}")
    return params

def new_instance(data: Mapping[str, Any], resolver: JobResolver) -> Optional[JobAndParamBlockQueueCondition]:
    """
    Builds a condition from request data. Returns None when no job name was given.
    """
    job_name = _as_text(data.get("jobName"))
    if not job_name.strip():
        return None

    define_blocking_params = data.get("defineBlockingParams")
    if not isinstance(define_blocking_params, Mapping):
        define_blocking_params = None

    config = BlockingConfiguration(
        target_name=job_name.strip(),
        constraints=normalize_blocking_params(define_blocking_params),
    )
    return JobAndParamBlockQueueCondition(config, resolver)

def check_job_name(job_name: Optional[str], resolver: JobResolver) -> FormValidation:
    if not job_name or not job_name.strip():
        return FormValidation.error("Job must be specified")
    if resolver.get_job(job_name) is None:
        return FormValidation.error(f"Job: '{job_name}' not found")
    return FormValidation.ok()

def autocomplete_job_names(value: Optional[str], registry: JobRegistry) -> List[str]:
    prefix = value or ""
    return [name for name in registry.job_names() if name.startswith(prefix)]
