from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Tuple
from datetime import datetime
import uuid

class ParameterValue(BaseModel):
    """A single name/value binding, compared on both fields."""
    model_config = ConfigDict(frozen=True)

    name: str
    value: str

    def is_valid_constraint(self) -> bool:
        # Blank names and empty values can never be part of a blocking set
        return bool(self.name and self.name.strip()) and self.value != ""

def normalize_job_name(name: str) -> str:
    """Job names are compared stripped. Blank names are rejected."""
    name = (name or "").strip()
    if not name:
        raise ValueError("Job name must not be blank")
    return name

_SCALARS = (str, int, float, bool)

def _binding(name: Any, value: Any) -> Optional[ParameterValue]:
    # One rule for every input shape: scalars become text, a None value means unset
    if not isinstance(name, _SCALARS):
        raise ValueError(f"Unsupported parameter name: {name!r}")
    if value is None:
        return None
    if not isinstance(value, _SCALARS):
        raise ValueError(f"Unsupported value for parameter {name}: {value!r}")
    return ParameterValue(name=str(name), value=str(value))

def coerce_parameters(raw: Any) -> List[ParameterValue]:
    """
    Normalizes the accepted parameter shapes into a list the models can validate:
    - None
    - a mapping of {name: value}
    - an iterable of ParameterValue, {"name": ..., "value": ...} dicts or (name, value) pairs
    Entries whose value is None are dropped.
    Always returns ParameterValue instances so the result can go into a frozenset.
    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
        raise ValueError(f"Unsupported parameters: {raw!r}")
    if isinstance(raw, Mapping):
        pairs = list(raw.items())
    else:
        pairs = []
        for entry in raw:
            if isinstance(entry, ParameterValue):
                pairs.append((entry.name, entry.value))
            elif isinstance(entry, Mapping):
                pairs.append((entry.get("name"), entry.get("value")))
            elif isinstance(entry, (tuple, list)) and len(entry) == 2:
                pairs.append((entry[0], entry[1]))
            else:
                raise ValueError(f"Unsupported parameter entry: {entry!r}")

    bindings = (_binding(name, value) for name, value in pairs)
    return [b for b in bindings if b is not None]

class BlockingConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_name: str = ""
    constraints: Tuple[ParameterValue, ...] = ()

    @field_validator("constraints", mode="before")
    @classmethod
    def _normalize_constraints(cls, value: Any) -> Any:
        return tuple(coerce_parameters(value))

    @field_validator("constraints")
    @classmethod
    def _drop_invalid_constraints(cls, value: Tuple[ParameterValue, ...]) -> Tuple[ParameterValue, ...]:
        return tuple(p for p in value if p.is_valid_constraint())

class QueuedItemParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    actual: FrozenSet[ParameterValue] = frozenset()

    @field_validator("actual", mode="before")
    @classmethod
    def _normalize_actual(cls, value: Any) -> Any:
        return frozenset(coerce_parameters(value))

    @classmethod
    def of(cls, raw: Any = None) -> "QueuedItemParameters":
        return cls(actual=raw)

    def is_empty(self) -> bool:
        return not self.actual

class BlockDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    blocked: bool = False
    reason: Optional[str] = None

    @model_validator(mode="after")
    def _reason_iff_blocked(self) -> "BlockDecision":
        if self.blocked and not self.reason:
            raise ValueError("A blocking decision must carry a reason")
        if not self.blocked and self.reason is not None:
            raise ValueError("An allowing decision cannot carry a reason")
        return self

    @classmethod
    def allow(cls) -> "BlockDecision":
        return cls(blocked=False)

    @classmethod
    def block(cls, reason: str) -> "BlockDecision":
        return cls(blocked=True, reason=reason)

class JobState(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    running: bool = False

class QueuedItem(BaseModel):
    item_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    job_name: str
    parameters: QueuedItemParameters = Field(default_factory=QueuedItemParameters)
    created_at: float = Field(default_factory=lambda: datetime.now().timestamp())
    status: str = "pending" # pending, blocked, running, completed
    why: Optional[str] = None # Latest block reason, surfaced verbatim

    @field_validator("job_name")
    @classmethod
    def _normalize_job_name(cls, value: str) -> str:
        return normalize_job_name(value)

    @field_validator("parameters", mode="before")
    @classmethod
    def _wrap_parameters(cls, value: Any) -> Any:
        if isinstance(value, QueuedItemParameters):
            return value
        # Already in model form: {"actual": [...]}
        if isinstance(value, dict) and set(value) == {"actual"} and not isinstance(value["actual"], str):
            return value
        return QueuedItemParameters.of(value)

    def parameter_list(self) -> List[dict]:
        return sorted(
            ({"name": p.name, "value": p.value} for p in self.parameters.actual),
            key=lambda p: (p["name"], p["value"]),
        )
