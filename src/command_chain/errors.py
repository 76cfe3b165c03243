"""Errors raised by the sequencer itself."""

from __future__ import annotations


class ChainError(RuntimeError):
    pass


class ChainBusyError(ChainError):
    def __init__(self, chain_name: str) -> None:
        super().__init__(f"Chain {chain_name!r} is already running; wait for it to drain before calling run again.")
        self.chain_name = chain_name


class DuplicateCompletionError(ChainError):
    def __init__(self, chain_name: str, position: int) -> None:
        super().__init__(
            f"Step {position} of chain {chain_name!r} signaled completion after it was already completed."
        )
        self.chain_name = chain_name
        self.position = position


class NoTaskGroupError(ChainError):
    pass
