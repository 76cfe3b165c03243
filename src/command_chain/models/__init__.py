"""Model types for chain configuration and runtime."""

from command_chain.models.chain_options import ChainOptions
from command_chain.models.chain_state import ChainState

__all__ = [
    "ChainOptions",
    "ChainState",
]
