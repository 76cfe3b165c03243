"""Pydantic model for per-chain options."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class ChainOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None  # label for log records; defaults to the chain class name
    on_duplicate_signal: Literal["ignore", "raise"] = "ignore"
