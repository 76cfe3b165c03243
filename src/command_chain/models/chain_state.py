"""Lifecycle states of a chain."""

from __future__ import annotations

from enum import Enum


class ChainState(str, Enum):
    IDLE = "idle"
    DRAINING = "draining"
