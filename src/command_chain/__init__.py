"""Public package exports."""

from command_chain.chain import Chain
from command_chain.errors import ChainBusyError
from command_chain.errors import ChainError
from command_chain.errors import DuplicateCompletionError
from command_chain.errors import NoTaskGroupError
from command_chain.models import ChainOptions
from command_chain.models import ChainState
from command_chain.orchestrator import ChainOrchestrator
from command_chain.orchestrator import CoroutineStep
from command_chain.step import CompletionCallback
from command_chain.step import DeferredStep
from command_chain.step import Step
from command_chain.step import StepFactory
from command_chain.step import is_deferred

__all__ = [
    "Chain",
    "ChainBusyError",
    "ChainError",
    "ChainOptions",
    "ChainOrchestrator",
    "ChainState",
    "CompletionCallback",
    "CoroutineStep",
    "DeferredStep",
    "DuplicateCompletionError",
    "NoTaskGroupError",
    "Step",
    "StepFactory",
    "is_deferred",
]
