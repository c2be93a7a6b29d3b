from blockqueue.conditions import descriptor
from blockqueue.registry import JobRegistry
from blockqueue.types import ParameterValue

def make_registry(*names):
    registry = JobRegistry()
    for name in names:
        registry.register(name)
    return registry

def test_single_object_blocking_params():
    params = descriptor.normalize_blocking_params({"blockingParams": {"name": "env", "value": "prod"}})
    assert params == [ParameterValue(name="env", value="prod")]

def test_list_blocking_params_keep_order():
    params = descriptor.normalize_blocking_params({"blockingParams": [
        {"name": "env", "value": "prod"},
        {"name": "region", "value": "eu"},
    ]})
    assert [p.name for p in params] == ["env", "region"]

def test_invalid_blocking_params_are_dropped():
    params = descriptor.normalize_blocking_params({"blockingParams": [
        {"name": " ", "value": "prod"},
        {"name": "env", "value": ""},
        {"name": "env"},
        {"value": "prod"},
        {"name": "env", "value": "prod"},
    ]})
    assert params == [ParameterValue(name="env", value="prod")]

def test_missing_blocking_params():
    assert descriptor.normalize_blocking_params(None) == []
    assert descriptor.normalize_blocking_params({}) == []
    assert descriptor.normalize_blocking_params({"blockingParams": None}) == []

def test_new_instance_without_job_name_returns_none():
    registry = make_registry("deploy")
    assert descriptor.new_instance({}, registry) is None
    assert descriptor.new_instance({"jobName": "  "}, registry) is None

def test_new_instance_builds_condition():
    registry = make_registry("deploy")
    condition = descriptor.new_instance({
        "jobName": "deploy",
        "defineBlockingParams": {"blockingParams": [{"name": "env", "value": "prod"}, {"name": "", "value": "x"}]},
    }, registry)
    assert condition.job_name == "deploy"
    assert condition.blocking_params == (ParameterValue(name="env", value="prod"),)

def test_new_instance_without_blocking_params_blocks_unconditionally():
    registry = make_registry("deploy")
    condition = descriptor.new_instance({"jobName": "deploy", "defineBlockingParams": None}, registry)
    assert condition.blocking_params == ()

def test_check_job_name():
    registry = make_registry("deploy")
    assert descriptor.check_job_name("deploy", registry).is_ok

    blank = descriptor.check_job_name("  ", registry)
    assert blank.kind == "error"
    assert blank.message == "Job must be specified"

    missing = descriptor.check_job_name("nope", registry)
    assert missing.kind == "error"
    assert missing.message == "Job: 'nope' not found"

def test_autocomplete_job_names():
    registry = make_registry("deploy-prod", "build", "deploy-dev")
    assert descriptor.autocomplete_job_names("dep", registry) == ["deploy-dev", "deploy-prod"]
    assert descriptor.autocomplete_job_names(None, registry) == ["build", "deploy-dev", "deploy-prod"]
