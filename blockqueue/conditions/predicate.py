from ..types import BlockDecision, BlockingConfiguration, QueuedItemParameters

def evaluate(config: BlockingConfiguration,
             target_is_running: bool,
             actual: QueuedItemParameters) -> BlockDecision:
    """
    Decides whether a queued item is held back while the target job runs.

    - Target not running (or not resolvable, which callers map to not running): allow.
    - Target running, no constraints configured: block unconditionally.
    - Target running, constraints configured: block only when the item's parameters
      contain every constraint. Extra parameters on the item are ignored, and an item
      without parameters never matches.

    Pure: reads its inputs, returns a fresh decision, never raises.
    """
    if not target_is_running:
        return BlockDecision.allow()

    if not config.constraints:
        return BlockDecision.block(f"{config.target_name} is currently running.")

    if actual.is_empty():
        return BlockDecision.allow()

    if actual.actual.issuperset(config.constraints):
        return BlockDecision.block(f"{config.target_name} is currently running and parameters are matched.")

    return BlockDecision.allow()
