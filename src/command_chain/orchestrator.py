"""Helper for running chains inside an anyio event loop."""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Optional

import anyio
from anyio.abc import TaskGroup

from command_chain.chain import Chain
from command_chain.errors import ChainBusyError, NoTaskGroupError
from command_chain.step import DeferredStep


logger = logging.getLogger(__name__)

_active_task_group: ContextVar[Optional[TaskGroup]] = ContextVar("command_chain_task_group", default=None)


class CoroutineStep(DeferredStep):
    """
    Deferred step backed by a coroutine.

    Subclasses implement perform. execute schedules it on the task group of
    the surrounding ChainOrchestrator.run and signals completion when it returns.
    """

    async def perform(self, payload: Any) -> None:
        raise NotImplementedError("CoroutineStep.perform must be implemented by subclasses.")

    def execute(self, payload: Any) -> None:
        task_group = _active_task_group.get()
        if task_group is None:
            raise NoTaskGroupError(f"{type(self).__name__} can only execute inside ChainOrchestrator.run.")
        task_group.start_soon(self._perform_then_complete, payload, name=type(self).__name__)

    async def _perform_then_complete(self, payload: Any) -> None:
        await self.perform(payload)
        self.command_complete()


class ChainOrchestrator:
    async def run(self, chain: Chain, payload: Any, *, timeout: float | None = None) -> Any:
        """
        Run the chain and wait until it drains. Returns the payload.

        Errors raised while the chain starts propagate unchanged; errors from
        coroutine steps surface as an exception group. On any failure or
        timeout the chain is stopped and left idle.
        """
        if chain.is_running:
            raise ChainBusyError(chain.name)
        drained = anyio.Event()
        chain.register_completion_callback(drained.set)
        start_error: Exception | None = None
        try:
            with anyio.fail_after(timeout):
                async with anyio.create_task_group() as task_group:
                    token = _active_task_group.set(task_group)
                    try:
                        chain.run(payload)
                    except Exception as exc:
                        start_error = exc
                        task_group.cancel_scope.cancel()
                    else:
                        await drained.wait()
                    finally:
                        _active_task_group.reset(token)
        except BaseException:
            chain.stop()
            raise
        if start_error is not None:
            raise start_error
        logger.debug("Chain %s finished under orchestrator", chain.name)
        return payload
