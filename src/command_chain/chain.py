"""Sequencer that runs steps in FIFO order against one shared payload."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, ClassVar, cast

from command_chain.errors import ChainBusyError, DuplicateCompletionError
from command_chain.models.chain_options import ChainOptions
from command_chain.models.chain_state import ChainState
from command_chain.step import CompletionCallback, DeferredStep, StepFactory, is_deferred


logger = logging.getLogger(__name__)


@dataclass
class _RunContext:
    payload: Any
    pending: deque[StepFactory]
    on_complete: CompletionCallback | None
    position: int = -1
    executing: bool = False  # the current step's execute() is on the stack
    completed_inline: bool = False


class _CompletionSignal:
    def __init__(self, chain: Chain, context: _RunContext, position: int) -> None:
        self._chain = chain
        self._context = context
        self._position = position
        self._fired = False

    def __call__(self) -> None:
        if self._fired or not self._chain._is_active(self._context):
            self._chain._reject_signal(self._position)
            return
        self._fired = True
        self._chain._resume(self._context)


class Chain(DeferredStep):
    """
    Runs a list of step factories one at a time, in the order they were added.

    Subclasses override initialize_chain and call add_step once per step.
    Immediate steps run back to back; when a deferred step is reached the
    chain waits for its completion signal before starting the next one. A
    chain is itself a deferred step, so chains nest: the parent callback
    registered through register_completion_callback fires once the queue
    drains.
    """

    default_options: ClassVar[ChainOptions] = ChainOptions()

    def __init__(self, options: ChainOptions | None = None) -> None:
        super().__init__()
        self.options: ChainOptions = options if options is not None else self.default_options
        self._factories: list[StepFactory] = []
        self._context: _RunContext | None = None
        self.initialize_chain()

    @property
    def name(self) -> str:
        return self.options.name or type(self).__name__

    @property
    def steps(self) -> tuple[StepFactory, ...]:
        return tuple(self._factories)

    @property
    def state(self) -> ChainState:
        if self._context is None:
            return ChainState.IDLE
        return ChainState.DRAINING

    @property
    def is_running(self) -> bool:
        return self._context is not None

    def initialize_chain(self) -> None:
        """Hook for subclasses: add the step factories here."""

    def add_step(self, factory: StepFactory) -> None:
        if not callable(factory):
            raise TypeError(f"Step factory must be callable, got {factory!r}.")
        self._factories.append(factory)

    def execute(self, payload: Any) -> None:
        self.run(payload)

    def run(self, payload: Any) -> None:
        if self._context is not None:
            raise ChainBusyError(self.name)
        on_complete = self._on_complete
        self._on_complete = None
        context = _RunContext(payload=payload, pending=deque(self._factories), on_complete=on_complete)
        self._context = context
        logger.debug("Chain %s started with %d step(s)", self.name, len(context.pending))
        self._advance(context)

    def stop(self) -> None:
        """
        Drop the current run, if any. Remaining steps never start, the parent
        callback is not fired, and signals from steps still in flight are
        treated as stale.
        """
        if self._context is not None:
            self._abandon(self._context)

    def command_complete(self) -> None:
        # A chain signals its parent only when its queue drains.
        pass

    def _advance(self, context: _RunContext) -> None:
        while context.pending:
            factory = context.pending.popleft()
            context.position += 1
            context.completed_inline = False
            deferred = False
            context.executing = True
            try:
                step = factory()
                if not callable(getattr(step, "execute", None)):
                    raise TypeError(f"Step factory {factory!r} returned {step!r}, which has no execute method.")
                deferred = is_deferred(step)
                logger.debug(
                    "Chain %s step %d: %s (%s)",
                    self.name,
                    context.position,
                    type(step).__name__,
                    "deferred" if deferred else "immediate",
                )
                if deferred:
                    signal = _CompletionSignal(self, context, context.position)
                    cast(DeferredStep, step).register_completion_callback(signal)
                step.execute(context.payload)
            except BaseException:
                self._abandon(context)
                raise
            finally:
                context.executing = False
            if deferred and not context.completed_inline:
                logger.debug("Chain %s waiting on step %d", self.name, context.position)
                return
        self._finish(context)

    def _resume(self, context: _RunContext) -> None:
        if context.executing:
            # Signaled from inside execute(); the running loop picks up the next step.
            context.completed_inline = True
            return
        logger.debug("Chain %s resumed after step %d", self.name, context.position)
        self._advance(context)

    def _finish(self, context: _RunContext) -> None:
        on_complete = context.on_complete
        context.on_complete = None
        self._context = None
        logger.debug("Chain %s drained", self.name)
        if on_complete is not None:
            on_complete()

    def _abandon(self, context: _RunContext) -> None:
        context.pending.clear()
        context.on_complete = None
        if self._context is context:
            self._context = None
        logger.debug("Chain %s stopped at step %d", self.name, context.position)

    def _is_active(self, context: _RunContext) -> bool:
        return self._context is context

    def _reject_signal(self, position: int) -> None:
        if self.options.on_duplicate_signal == "raise":
            raise DuplicateCompletionError(self.name, position)
        logger.warning("Ignored duplicate completion signal from step %d of chain %s", position, self.name)
