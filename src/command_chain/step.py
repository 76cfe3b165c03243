"""Step contract: immediate and deferred steps."""

from __future__ import annotations

from typing import Any, Callable, ClassVar, TypeAlias

CompletionCallback: TypeAlias = Callable[[], None]
StepFactory: TypeAlias = Callable[[], "Step"]


class Step:
    """
    Immediate step: its effect on the payload is complete when execute returns.
    Subclasses override execute.
    """

    is_deferred: ClassVar[bool] = False

    def execute(self, payload: Any) -> None:
        raise NotImplementedError("Step.execute must be implemented by subclasses.")


class DeferredStep(Step):
    """
    Step whose completion is signaled after execute returns.

    Call command_complete from the subclass once the work is finished. The
    registered callback runs at most once; without one the signal is a no-op.
    """

    is_deferred: ClassVar[bool] = True

    def __init__(self) -> None:
        self._on_complete: CompletionCallback | None = None

    def register_completion_callback(self, callback: CompletionCallback) -> None:
        self._on_complete = callback

    def command_complete(self) -> None:
        # getattr: subclasses may skip super().__init__()
        callback = getattr(self, "_on_complete", None)
        self._on_complete = None
        if callback is not None:
            callback()


def is_deferred(step: object) -> bool:
    if getattr(step, "is_deferred", False) is not True:
        return False
    return callable(getattr(step, "register_completion_callback", None))
