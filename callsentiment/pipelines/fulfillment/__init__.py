"""Recording fulfillment pipeline package.

Modules are organised by responsibility:

1. `types` – the job, its states/stages and the transition record.
2. `flow` – the canonical stage order and the state each stage completes.
3. `runner` – the coroutine that executes one job and reports transitions.
"""

from .flow import FulfillmentFlow, PipelineStage
from .runner import FulfillmentPipeline
from .types import Job, JobState, Stage, Transition, TransitionListener

__all__ = [
    "FulfillmentFlow",
    "FulfillmentPipeline",
    "PipelineStage",
    "Job",
    "JobState",
    "Stage",
    "Transition",
    "TransitionListener",
]
